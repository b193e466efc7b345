"""
Code 39 validation, cleaning and human-readable grouping.
"""

# Standard Library
import dataclasses
import datetime
import re

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config
import inventory_label_engine.errors


EncodingError = ile.errors.EncodingError

CODE39_ALPHABET = ile.config.CODE39_ALPHABET
CODE39_MAX_LENGTH = ile.config.CODE39_MAX_LENGTH
FALLBACK_PREFIX_LENGTH = ile.config.FALLBACK_PREFIX_LENGTH
FALLBACK_DEFAULT_PREFIX = ile.config.FALLBACK_DEFAULT_PREFIX

NON_ENCODED = re.compile(r"[^0-9A-Z]")


@dataclasses.dataclass(frozen=True)
class BarcodeSymbol:
	is_valid: bool
	cleaned_value: str
	display_grouped: str
	error_message: str | None = None


#============================================
def _invalid(message: str) -> BarcodeSymbol:
	return BarcodeSymbol(is_valid=False, cleaned_value="", display_grouped="", error_message=message)


#============================================
def group_size_for(length: int) -> int:
	"""
	Pick the caption group size for a value length.

	Args:
		length: Cleaned value length.

	Returns:
		Group size, 0 when the value is left ungrouped.
	"""
	if length <= 4:
		return 0
	if length <= 6:
		return 2
	if length <= 12:
		return 3
	return 4


#============================================
def group_for_display(value: str, separator: str = "-") -> str:
	"""
	Insert a separator every few characters for the caption.

	Args:
		value: Cleaned barcode value.
		separator: Group separator, hyphen or space.

	Returns:
		Grouped caption text.
	"""
	size = group_size_for(len(value))
	if size == 0:
		return value
	groups = [value[index:index + size] for index in range(0, len(value), size)]
	return separator.join(groups)


#============================================
def validate(value: object, separator: str = "-") -> BarcodeSymbol:
	"""
	Validate a value against the Code 39 character set and length.

	Args:
		value: Raw barcode value.
		separator: Caption group separator.

	Returns:
		BarcodeSymbol; invalid symbols carry an error message.
	"""
	if value is None:
		return _invalid("Barcode value is required")
	text = str(value).strip()
	if not text:
		return _invalid("Barcode value cannot be empty")

	bad_chars = sorted({char for char in text if char not in CODE39_ALPHABET})
	if bad_chars:
		shown = "".join(bad_chars)
		return _invalid(
			"Code 39 only supports digits, uppercase letters, space and - . $ / + %"
			f" (found {shown!r})"
		)

	cleaned = NON_ENCODED.sub("", text)
	if not cleaned:
		return _invalid("Barcode value has no letters or digits to encode")
	if len(cleaned) > CODE39_MAX_LENGTH:
		return _invalid(
			f"Barcode value too long ({len(cleaned)} characters, maximum {CODE39_MAX_LENGTH} for Code 39)"
		)

	return BarcodeSymbol(
		is_valid=True,
		cleaned_value=cleaned,
		display_grouped=group_for_display(cleaned, separator),
		error_message=None,
	)


#============================================
def require_valid(value: object, separator: str = "-") -> BarcodeSymbol:
	"""
	Validate a value and raise when it cannot be encoded.

	Args:
		value: Raw barcode value.
		separator: Caption group separator.

	Returns:
		Valid BarcodeSymbol.

	Raises:
		EncodingError: When the value is not valid Code 39.
	"""
	symbol = validate(value, separator)
	if not symbol.is_valid:
		raise EncodingError(symbol.error_message)
	return symbol


#============================================
def build_fallback_value(sku: object, product_name: object, now: datetime.datetime) -> str:
	"""
	Build a synthetic barcode value from the SKU or product name.

	The time suffix is best effort and does not guarantee uniqueness.

	Args:
		sku: SKU text, may be empty.
		product_name: Product name, may be empty.
		now: Generation timestamp.

	Returns:
		Upper-case alphanumeric value.
	"""
	prefix = ""
	for source in (sku, product_name):
		if source is None:
			continue
		prefix = NON_ENCODED.sub("", str(source).upper())[:FALLBACK_PREFIX_LENGTH]
		if prefix:
			break
	if not prefix:
		prefix = FALLBACK_DEFAULT_PREFIX
	return f"{prefix}{now:%H%M%S}"
