import datetime

import pytest

import inventory_label_engine.barcode_codec as barcode_codec
import inventory_label_engine.errors as errors


#============================================
def test_lowercase_is_invalid() -> None:
	"""
	Ensure lowercase input is rejected with a descriptive message.
	"""
	symbol = barcode_codec.validate("12-34 ab")
	assert not symbol.is_valid
	assert symbol.cleaned_value == ""
	assert "Code 39" in symbol.error_message
	assert "ab" in symbol.error_message


#============================================
def test_valid_value_is_cleaned() -> None:
	symbol = barcode_codec.validate("AB12-34")
	assert symbol.is_valid
	assert symbol.cleaned_value == "AB1234"
	assert symbol.display_grouped == "AB-12-34"
	assert symbol.error_message is None


#============================================
@pytest.mark.parametrize("value", [None, "", "   "])
def test_empty_values_are_invalid(value) -> None:
	symbol = barcode_codec.validate(value)
	assert not symbol.is_valid
	assert symbol.error_message


#============================================
def test_punctuation_only_is_invalid() -> None:
	symbol = barcode_codec.validate("-.-/")
	assert not symbol.is_valid


#============================================
def test_length_limit() -> None:
	"""
	Ensure the cleaned length limit of 43 characters is enforced.
	"""
	assert barcode_codec.validate("A" * 43).is_valid
	symbol = barcode_codec.validate("A" * 44)
	assert not symbol.is_valid
	assert "44" in symbol.error_message
	# punctuation is stripped before the length check
	assert barcode_codec.validate("A" * 43 + "-.$").is_valid


#============================================
def test_cleaned_value_revalidates() -> None:
	"""
	Ensure validation is idempotent on its own cleaned output.
	"""
	for value in ("AB12-34", "SKU 0001/7", "X$Y%Z+1.2", "1234567890ABCDEFGHIJ"):
		first = barcode_codec.validate(value)
		assert first.is_valid
		assert set(first.cleaned_value) <= set("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ")
		second = barcode_codec.validate(first.cleaned_value)
		assert second.is_valid
		assert second.cleaned_value == first.cleaned_value


#============================================
@pytest.mark.parametrize(
	"value, expected",
	[
		("1234", "1234"),
		("12345", "12-34-5"),
		("123456789", "123-456-789"),
		("1234567890123", "1234-5678-9012-3"),
	],
)
def test_group_for_display(value: str, expected: str) -> None:
	assert barcode_codec.group_for_display(value) == expected


#============================================
def test_group_separator_from_spec() -> None:
	symbol = barcode_codec.validate("ABC123456", separator=" ")
	assert symbol.display_grouped == "ABC 123 456"
	assert symbol.cleaned_value == "ABC123456"


#============================================
def test_require_valid_raises() -> None:
	with pytest.raises(errors.EncodingError):
		barcode_codec.require_valid("bad value")
	assert barcode_codec.require_valid("OK1").cleaned_value == "OK1"


#============================================
def test_fallback_value() -> None:
	"""
	Ensure fallback values use the SKU, then the name, then a fixed prefix.
	"""
	now = datetime.datetime(2025, 7, 31, 14, 5, 9)
	assert barcode_codec.build_fallback_value("ab-12", "Blue Dream", now) == "AB12140509"
	assert barcode_codec.build_fallback_value("", "Blue Dream Extra Long", now) == "BLUEDREAME140509"
	assert barcode_codec.build_fallback_value(None, None, now) == "ITEM140509"
	assert barcode_codec.validate(barcode_codec.build_fallback_value("", "x", now)).is_valid
