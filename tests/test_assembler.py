import datetime

import pytest

import inventory_label_engine.assembler as assembler
import inventory_label_engine.brand_splitter as brand_splitter
import inventory_label_engine.config as config
import inventory_label_engine.errors as errors
import inventory_label_engine.label_specs as label_specs
import inventory_label_engine.models as models


SPEC = label_specs.FOUR_UP_ROTATED_LANDSCAPE


#============================================
def make_item(**overrides) -> models.SourceItem:
	"""
	Build a typical source item with optional field overrides.
	"""
	values = {
		"sku": "CUR-1001",
		"barcode": "CUR1001",
		"product_name": "Curaleaf Pink Champagne Capsules",
		"source": "MAIN",
		"size": "30 ct",
	}
	values.update(overrides)
	return models.SourceItem(**values)


#============================================
def test_one_plan_per_copy(fixed_now: datetime.datetime) -> None:
	"""
	Ensure copies are numbered and share identical content.
	"""
	data = models.EnhancedData(label_quantity=3, box_count=3, harvest_date="2025-07-04")
	plans = assembler.assemble(make_item(), data, SPEC, "warehouse", now=fixed_now)
	assert [plan.copy_index for plan in plans] == [0, 1, 2]
	assert [plan.box_number for plan in plans] == [1, 2, 3]
	assert all(plan.total_boxes == 3 for plan in plans)
	assert all(plan.position is None for plan in plans)
	assert all(plan.spec_name == SPEC.name for plan in plans)
	first = plans[0]
	assert first.brand_info.brand == "Curaleaf"
	assert first.brand_info.method == brand_splitter.BrandMethod.EXACT_MATCH
	assert first.content.brand == "Curaleaf"
	assert first.content.harvest_date == "07/04/25"
	assert first.barcode.cleaned_value == "CUR1001"
	assert first.barcode.display_grouped == "CUR 100 1"


#============================================
def test_font_sizes_within_spec_range(fixed_now: datetime.datetime) -> None:
	for spec in label_specs.list_label_specs():
		for name in ("OG", "Curaleaf " + "Very Long Product Name " * 6):
			plans = assembler.assemble(
				make_item(product_name=name),
				models.EnhancedData(),
				spec,
				"user",
				now=fixed_now,
			)
			size = plans[0].font_sizes.product
			assert spec.min_font_size <= size <= spec.max_font_size
			assert len(plans[0].content.product_name) <= spec.product_name_max_length


#============================================
def test_audit_string(fixed_now: datetime.datetime) -> None:
	"""
	Ensure the audit line uses 12-hour time and a truncated user.
	"""
	plans = assembler.assemble(make_item(), models.EnhancedData(), SPEC, "warehouse_lead", now=fixed_now)
	assert plans[0].audit_string == "07/31/25 2:05 PM (warehous)"


#============================================
def test_audit_string_morning_and_unknown_user() -> None:
	now = datetime.datetime(2025, 1, 2, 0, 7, 0)
	assert assembler.build_audit_string(now, None, 8) == "01/02/25 12:07 AM (Unknown)"
	now = datetime.datetime(2025, 1, 2, 9, 30, 0)
	assert assembler.build_audit_string(now, "  ", 8) == "01/02/25 9:30 AM (Unknown)"


#============================================
def test_audit_user_length_varies_by_spec(fixed_now: datetime.datetime) -> None:
	plans = assembler.assemble(
		make_item(),
		models.EnhancedData(),
		label_specs.TWO_UP_OVERSIZE,
		"warehouse_lead",
		now=fixed_now,
	)
	assert plans[0].audit_string.endswith("(warehouse_le)")


#============================================
@pytest.mark.parametrize(
	"quantity, boxes, expected",
	[
		(4, 2, [1, 1, 2, 2]),
		(5, 2, [1, 1, 1, 2, 2]),
		(3, 1, [1, 1, 1]),
		(2, 5, [1, 2]),
		(3, 3, [1, 2, 3]),
		(6, None, [1, 1, 1, 1, 1, 1]),
	],
)
def test_box_numbers(quantity: int, boxes: int | None, expected: list[int]) -> None:
	"""
	Ensure copies spread evenly over boxes and stay within 1..box_count.
	"""
	numbers = [assembler.compute_box_number(index, quantity, boxes) for index in range(quantity)]
	assert numbers == expected
	assert all(1 <= number <= (boxes or 1) for number in numbers)


#============================================
def test_missing_identifiers_rejected(fixed_now: datetime.datetime) -> None:
	item = models.SourceItem(sku=" ", barcode="", product_name=None)
	with pytest.raises(errors.ValidationError):
		assembler.assemble(item, models.EnhancedData(), SPEC, "user", now=fixed_now)


#============================================
@pytest.mark.parametrize(
	"data",
	[
		models.EnhancedData(label_quantity=0),
		models.EnhancedData(box_count=0),
		models.EnhancedData(case_quantity=0),
		models.EnhancedData(label_quantity="two"),
		models.EnhancedData(label_quantity=2.5),
		models.EnhancedData(box_count=True),
	],
)
def test_bad_quantities_rejected(data: models.EnhancedData, fixed_now: datetime.datetime) -> None:
	with pytest.raises(errors.ValidationError):
		assembler.assemble(make_item(), data, SPEC, "user", now=fixed_now)


#============================================
def test_sku_used_when_barcode_missing(fixed_now: datetime.datetime) -> None:
	plans = assembler.assemble(make_item(barcode=""), models.EnhancedData(), SPEC, "user", now=fixed_now)
	assert plans[0].barcode.cleaned_value == "CUR1001"
	assert any("encoding SKU" in warning for warning in plans[0].warnings)


#============================================
def test_fallback_barcode(fixed_now: datetime.datetime) -> None:
	"""
	Ensure a synthetic value is generated when barcode and SKU are empty.
	"""
	item = make_item(barcode="", sku="", product_name="Blue Dream")
	plans = assembler.assemble(item, models.EnhancedData(), SPEC, "user", now=fixed_now)
	assert plans[0].barcode.is_valid
	assert plans[0].barcode.cleaned_value == "BLUEDREAM140509"


#============================================
def test_fallback_disabled(fixed_now: datetime.datetime) -> None:
	item = make_item(barcode="", sku="", product_name="Blue Dream")
	plans = assembler.assemble(item, models.EnhancedData(), SPEC, "user", now=fixed_now, allow_fallback=False)
	assert not plans[0].barcode.is_valid
	assert plans[0].barcode.error_message


#============================================
def test_invalid_barcode_still_produces_plans(fixed_now: datetime.datetime) -> None:
	"""
	Ensure an unencodable barcode is carried on the plan, not raised.
	"""
	plans = assembler.assemble(make_item(barcode="cur-1001"), models.EnhancedData(label_quantity=2), SPEC, "user", now=fixed_now)
	assert len(plans) == 2
	assert not plans[0].barcode.is_valid
	assert any("not encodable" in warning for warning in plans[0].warnings)


#============================================
def test_recorded_brand_takes_priority(fixed_now: datetime.datetime) -> None:
	item = make_item(product_name="Northern Lights Farm Blue Dream", brand="Northern Lights Farm")
	plans = assembler.assemble(item, models.EnhancedData(), SPEC, "user", now=fixed_now)
	assert plans[0].brand_info.brand == "Northern Lights Farm"
	assert plans[0].brand_info.remainder_product_name == "Blue Dream"
	assert plans[0].font_sizes.brand is not None


#============================================
def test_no_brand_has_no_brand_size(fixed_now: datetime.datetime) -> None:
	plans = assembler.assemble(make_item(product_name="Blue Dream"), models.EnhancedData(), SPEC, "user", now=fixed_now)
	assert not plans[0].brand_info.detected
	assert plans[0].font_sizes.brand is None
	assert plans[0].content.brand_lines == ()


#============================================
def test_unrecognized_date_warns(fixed_now: datetime.datetime) -> None:
	data = models.EnhancedData(packaged_date="next tuesday")
	plans = assembler.assemble(make_item(), data, SPEC, "user", now=fixed_now)
	assert plans[0].content.packaged_date == "next tuesday"
	assert any("packaged date" in warning for warning in plans[0].warnings)


#============================================
def test_assembly_is_deterministic(fixed_now: datetime.datetime) -> None:
	"""
	Ensure identical inputs produce identical plans.
	"""
	data = models.EnhancedData(label_quantity=2, box_count=2, case_quantity=24)
	first = assembler.assemble(make_item(), data, SPEC, "user", config.DEFAULT_BRANDS, now=fixed_now)
	second = assembler.assemble(make_item(), data, SPEC, "user", config.DEFAULT_BRANDS, now=fixed_now)
	assert first == second
	assert first[0].content.case_quantity == "24"


#============================================
def test_unprintable_characters_are_folded_and_reported(fixed_now: datetime.datetime) -> None:
	"""
	Ensure non-ASCII text is folded for the PDF fonts and flagged.
	"""
	item = make_item(product_name="Blue Dream ★ 藍夢 Café")
	plans = assembler.assemble(item, models.EnhancedData(), SPEC, "user", now=fixed_now)
	content = plans[0].content
	assert content.product_name == "Blue Dream Cafe"
	assert all(line.isascii() for line in content.product_lines)
	assert any("product name" in warning and "★" in warning for warning in plans[0].warnings)


#============================================
def test_accented_text_folds_without_warning(fixed_now: datetime.datetime) -> None:
	plans = assembler.assemble(make_item(strain="Crème Brûlée"), models.EnhancedData(), SPEC, "user", now=fixed_now)
	assert plans[0].content.strain == "Creme Brulee"
	assert not any("cannot print" in warning for warning in plans[0].warnings)


#============================================
def test_non_ascii_barcode_is_not_encodable(fixed_now: datetime.datetime) -> None:
	plans = assembler.assemble(make_item(barcode="ÉB12"), models.EnhancedData(), SPEC, "user", now=fixed_now)
	assert not plans[0].barcode.is_valid
