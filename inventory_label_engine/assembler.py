"""
Assemble render plans for every copy of one inventory item.
"""

# Standard Library
import datetime
from collections.abc import Sequence

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.barcode_codec
import inventory_label_engine.brand_splitter
import inventory_label_engine.config
import inventory_label_engine.errors
import inventory_label_engine.font_fitter
import inventory_label_engine.label_specs
import inventory_label_engine.models
import inventory_label_engine.text_normalizer


LabelSpec = ile.label_specs.LabelSpec
SourceItem = ile.models.SourceItem
EnhancedData = ile.models.EnhancedData
RenderPlan = ile.models.RenderPlan
LabelContent = ile.models.LabelContent
FontSizes = ile.models.FontSizes
BrandInfo = ile.brand_splitter.BrandInfo
BarcodeSymbol = ile.barcode_codec.BarcodeSymbol
FontFitResult = ile.font_fitter.FontFitResult
CharWidthEstimator = ile.font_fitter.CharWidthEstimator
ValidationError = ile.errors.ValidationError

clean_text = ile.text_normalizer.clean_text

DEFAULT_BRANDS = ile.config.DEFAULT_BRANDS
LABEL_QUANTITY_MIN = ile.config.LABEL_QUANTITY_MIN
CASE_QUANTITY_MIN = ile.config.CASE_QUANTITY_MIN
BOX_COUNT_MIN = ile.config.BOX_COUNT_MIN
UNKNOWN_USER = ile.config.UNKNOWN_USER
DEFAULT_SOURCE = ile.config.DEFAULT_SOURCE
SOURCE_MAX_LENGTH = ile.config.SOURCE_MAX_LENGTH


#============================================
def validate_item(item: SourceItem) -> None:
	"""
	Check that an item carries at least one identifying field.

	Args:
		item: Source item.

	Raises:
		ValidationError: When sku, barcode and product name are all empty.
	"""
	identifiers = (item.sku, item.barcode, item.product_name)
	if any(clean_text(value, ascii_only=False) for value in identifiers):
		return
	raise ValidationError("item has no SKU, barcode or product name")


#============================================
def _check_quantity(label: str, value, minimum: int, optional: bool) -> None:
	if value is None and optional:
		return
	if isinstance(value, bool) or not isinstance(value, int):
		raise ValidationError(f"{label} must be a whole number, got {value!r}")
	if value < minimum:
		raise ValidationError(f"{label} must be at least {minimum}, got {value}")


#============================================
def validate_enhanced_data(enhanced_data: EnhancedData) -> None:
	"""
	Check user-entered quantities.

	Args:
		enhanced_data: Per-run metadata.

	Raises:
		ValidationError: When a quantity is not a whole number or is below
			its minimum.
	"""
	_check_quantity("label quantity", enhanced_data.label_quantity, LABEL_QUANTITY_MIN, False)
	_check_quantity("box count", enhanced_data.box_count, BOX_COUNT_MIN, True)
	_check_quantity("case quantity", enhanced_data.case_quantity, CASE_QUANTITY_MIN, True)


#============================================
def compute_box_number(copy_index: int, label_quantity: int, box_count: int | None) -> int:
	"""
	Compute the 1-based box a copy belongs to.

	With more copies than boxes, copies are spread evenly over the
	boxes; otherwise each copy gets the next box. The result always
	lies in 1..box_count.

	Args:
		copy_index: 0-based copy index.
		label_quantity: Total copies for the item.
		box_count: Number of boxes, None for one box.

	Returns:
		Box number.
	"""
	boxes = box_count or 1
	if label_quantity <= 0:
		return 1
	if boxes >= label_quantity:
		return copy_index + 1
	return copy_index * boxes // label_quantity + 1


#============================================
def build_audit_string(now: datetime.datetime, audit_user: str | None, max_user_length: int) -> str:
	"""
	Build the audit line printed at the bottom of a label.

	Args:
		now: Generation timestamp.
		audit_user: Acting username.
		max_user_length: Characters of the username to keep.

	Returns:
		Text like "07/31/25 2:05 PM (warehous)".
	"""
	user = clean_text(audit_user) or UNKNOWN_USER
	hour = now.hour % 12 or 12
	meridiem = "PM" if now.hour >= 12 else "AM"
	return f"{now:%m/%d/%y} {hour}:{now:%M} {meridiem} ({user[:max_user_length]})"


#============================================
def resolve_barcode(
	item: SourceItem,
	spec: LabelSpec,
	now: datetime.datetime,
	allow_fallback: bool,
) -> tuple[BarcodeSymbol, list[str]]:
	"""
	Pick and validate the value encoded in the label barcode.

	Args:
		item: Source item.
		spec: Label spec, supplies the caption separator.
		now: Generation timestamp for the fallback suffix.
		allow_fallback: Whether a synthetic value may be generated.

	Returns:
		Tuple of (BarcodeSymbol, warnings).
	"""
	warnings: list[str] = []
	value = clean_text(item.barcode, ascii_only=False)
	if not value:
		value = clean_text(item.sku, ascii_only=False)
		if value:
			warnings.append("barcode missing, encoding SKU")
	if not value and allow_fallback:
		value = ile.barcode_codec.build_fallback_value(item.sku, item.product_name, now)
		warnings.append(f"barcode and SKU missing, generated fallback {value}")
	symbol = ile.barcode_codec.validate(value, spec.barcode_separator)
	if not symbol.is_valid:
		warnings.append(f"barcode not encodable: {symbol.error_message}")
	return (symbol, warnings)


#============================================
def fit_text_regions(
	brand_info: BrandInfo,
	brand_display: str,
	spec: LabelSpec,
	estimator: CharWidthEstimator | None,
) -> tuple[FontFitResult, FontFitResult | None]:
	"""
	Fit product and brand text into their label regions.

	Args:
		brand_info: Brand split result.
		brand_display: Formatted brand text.
		spec: Label spec.
		estimator: Measurement strategy.

	Returns:
		Tuple of (product fit, brand fit or None).
	"""
	regions = spec.regions
	min_size, max_size = spec.product_font_range
	product_fit = ile.font_fitter.fit(
		brand_info.remainder_product_name,
		regions.product.width,
		regions.product.height,
		min_size,
		max_size,
		estimator=estimator,
	)
	brand_fit = None
	if brand_info.detected and brand_display:
		min_size, max_size = spec.brand_font_range
		brand_fit = ile.font_fitter.fit(
			brand_display,
			regions.brand.width,
			regions.brand.height,
			min_size,
			max_size,
			estimator=estimator,
		)
	return (product_fit, brand_fit)


#============================================
def build_content(
	item: SourceItem,
	enhanced_data: EnhancedData,
	product_name: str,
	brand_display: str,
	product_fit: FontFitResult,
	brand_fit: FontFitResult | None,
) -> tuple[LabelContent, list[str]]:
	"""
	Format every display string of a label.

	Args:
		item: Source item.
		enhanced_data: Per-run metadata.
		product_name: Normalized product name.
		brand_display: Formatted brand text.
		product_fit: Product text fit.
		brand_fit: Brand text fit or None.

	Returns:
		Tuple of (LabelContent, warnings).
	"""
	warnings: list[str] = []
	harvest = ile.text_normalizer.normalize_date(enhanced_data.harvest_date)
	packaged = ile.text_normalizer.normalize_date(enhanced_data.packaged_date)
	if harvest.warning:
		warnings.append(f"harvest date {harvest.text!r} not in an accepted pattern")
	if packaged.warning:
		warnings.append(f"packaged date {packaged.text!r} not in an accepted pattern")
	display_fields = (
		("product name", item.product_name),
		("brand", item.brand),
		("source", item.source),
		("size", item.size),
		("strain", item.strain),
		("location", item.location),
	)
	for field_name, value in display_fields:
		dropped = ile.text_normalizer.unprintable_characters(value)
		if dropped:
			warnings.append(f"{field_name} has characters the label font cannot print: {dropped}")

	brand_lines: tuple[str, ...] = ()
	if brand_fit is not None:
		brand_lines = brand_fit.lines
	source = clean_text(item.source) or DEFAULT_SOURCE
	content = LabelContent(
		product_name=product_name,
		product_lines=product_fit.lines,
		brand=brand_display,
		brand_lines=brand_lines,
		sku=ile.text_normalizer.format_sku(item.sku),
		source=source[:SOURCE_MAX_LENGTH],
		size=ile.text_normalizer.format_size(item.size),
		strain=ile.text_normalizer.format_strain(item.strain),
		location=ile.text_normalizer.format_location(item.location),
		harvest_date=harvest.text,
		packaged_date=packaged.text,
		case_quantity=ile.text_normalizer.format_quantity(enhanced_data.case_quantity),
	)
	return (content, warnings)


#============================================
def assemble(
	item: SourceItem,
	enhanced_data: EnhancedData,
	spec: LabelSpec,
	audit_user: str | None,
	brand_dictionary: Sequence[str] = DEFAULT_BRANDS,
	now: datetime.datetime | None = None,
	allow_fallback: bool = True,
	estimator: CharWidthEstimator | None = None,
) -> list[RenderPlan]:
	"""
	Build one render plan per requested copy of an item.

	Plans are returned without a sheet position; the paginator places
	them.

	Args:
		item: Source item.
		enhanced_data: Per-run metadata.
		spec: Label spec.
		audit_user: Acting username.
		brand_dictionary: Ordered brand names.
		now: Generation timestamp, current local time by default.
		allow_fallback: Whether a synthetic barcode may be generated.
		estimator: Text measurement strategy.

	Returns:
		List of RenderPlan, one per copy, in copy order.

	Raises:
		ValidationError: When the item cannot produce any label.
	"""
	validate_item(item)
	validate_enhanced_data(enhanced_data)
	if now is None:
		now = datetime.datetime.now()

	product_name = ile.text_normalizer.normalize(item.product_name, spec.product_name_max_length)
	dictionary = list(brand_dictionary)
	recorded_brand = clean_text(item.brand)
	if recorded_brand:
		dictionary.insert(0, recorded_brand)
	brand_info = ile.brand_splitter.split(product_name, dictionary)
	brand_display = ile.text_normalizer.format_brand(brand_info.brand)

	product_fit, brand_fit = fit_text_regions(brand_info, brand_display, spec, estimator)
	font_sizes = FontSizes(
		product=product_fit.font_size,
		brand=None if brand_fit is None else brand_fit.font_size,
	)
	barcode, warnings = resolve_barcode(item, spec, now, allow_fallback)
	content, content_warnings = build_content(
		item,
		enhanced_data,
		product_name,
		brand_display,
		product_fit,
		brand_fit,
	)
	warnings.extend(content_warnings)
	if not product_fit.fits:
		warnings.append(f"product name overflows its region at minimum size {product_fit.font_size}")
	if brand_fit is not None and not brand_fit.fits:
		warnings.append(f"brand overflows its region at minimum size {brand_fit.font_size}")

	audit_string = build_audit_string(now, audit_user, spec.audit_user_max_length)
	total_boxes = enhanced_data.box_count or 1
	plans: list[RenderPlan] = []
	for copy_index in range(enhanced_data.label_quantity):
		plan = RenderPlan(
			item=item,
			brand_info=brand_info,
			font_sizes=font_sizes,
			barcode=barcode,
			audit_string=audit_string,
			position=None,
			copy_index=copy_index,
			box_number=compute_box_number(copy_index, enhanced_data.label_quantity, enhanced_data.box_count),
			total_boxes=total_boxes,
			label_quantity=enhanced_data.label_quantity,
			spec_name=spec.name,
			content=content,
			warnings=tuple(warnings),
		)
		plans.append(plan)
	return plans
