"""
Physical label sheet formats.

Each supported stock is described by data only: label and sheet size,
grid shape, printer margin, content rotation, font ranges and the text
regions of the label content frame. All values are PDF points. Regions
are measured from the top-left corner of the content frame, which is
the label rotated to landscape when content_rotation_degrees is 90.
"""

# Standard Library
import dataclasses

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config
import inventory_label_engine.errors


ConfigurationError = ile.errors.ConfigurationError

PRINTER_MARGIN = ile.config.PRINTER_MARGIN
inches_to_points = ile.config.inches_to_points

SUPPORTED_ROTATIONS = (0, 90)


@dataclasses.dataclass(frozen=True)
class Region:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class LabelRegions:
	header: Region
	brand: Region
	product: Region
	barcode: Region
	caption: Region
	details: Region
	audit: Region
	writing_box: Region | None = None


@dataclasses.dataclass(frozen=True)
class LabelSpec:
	name: str
	description: str
	width: float
	height: float
	labels_per_sheet: int
	columns: int
	rows: int
	sheet_width: float
	sheet_height: float
	content_rotation_degrees: int
	printer_margin: float
	regions: LabelRegions
	product_font_range: tuple[float, float]
	brand_font_range: tuple[float, float]
	body_font_size: float
	caption_font_size: float
	audit_font_size: float
	product_name_max_length: int
	audit_user_max_length: int
	barcode_separator: str = "-"
	column_gap: float = 0.0
	row_gap: float = 0.0

	@property
	def min_font_size(self) -> float:
		return self.product_font_range[0]

	@property
	def max_font_size(self) -> float:
		return self.product_font_range[1]

	@property
	def is_rotated(self) -> bool:
		return self.content_rotation_degrees != 0


#============================================
def validate_label_spec(spec: LabelSpec) -> LabelSpec:
	"""
	Check a label spec for internal consistency.

	Args:
		spec: LabelSpec to check.

	Returns:
		The same spec.

	Raises:
		ConfigurationError: When the spec cannot be laid out.
	"""
	problems: list[str] = []
	if spec.content_rotation_degrees not in SUPPORTED_ROTATIONS:
		problems.append(f"rotation {spec.content_rotation_degrees} not in {SUPPORTED_ROTATIONS}")
	if spec.columns < 1 or spec.rows < 1:
		problems.append("grid needs at least one column and one row")
	if spec.labels_per_sheet != spec.columns * spec.rows:
		problems.append(
			f"labels_per_sheet {spec.labels_per_sheet} != columns x rows {spec.columns * spec.rows}"
		)
	if spec.width <= 0 or spec.height <= 0:
		problems.append("label size must be positive")
	printable_width = spec.sheet_width - 2.0 * spec.printer_margin
	printable_height = spec.sheet_height - 2.0 * spec.printer_margin
	grid_width = spec.columns * spec.width + (spec.columns - 1) * spec.column_gap
	grid_height = spec.rows * spec.height + (spec.rows - 1) * spec.row_gap
	if grid_width > printable_width + 1e-6 or grid_height > printable_height + 1e-6:
		problems.append(
			f"grid {grid_width:.1f}x{grid_height:.1f} exceeds printable area"
			f" {printable_width:.1f}x{printable_height:.1f}"
		)
	low, high = spec.product_font_range
	if low <= 0 or high < low:
		problems.append(f"bad product font range {spec.product_font_range}")
	low, high = spec.brand_font_range
	if low <= 0 or high < low:
		problems.append(f"bad brand font range {spec.brand_font_range}")
	if problems:
		raise ConfigurationError(f"label spec {spec.name!r}: " + "; ".join(problems))
	return spec


TWELVE_UP_PORTRAIT = LabelSpec(
	name="12-up-portrait",
	description="Uline S-5627, 4 x 1.5 in, 12 per letter sheet",
	width=inches_to_points(4.0),
	height=inches_to_points(1.5),
	labels_per_sheet=12,
	columns=2,
	rows=6,
	sheet_width=inches_to_points(8.5),
	sheet_height=inches_to_points(11.0),
	content_rotation_degrees=0,
	printer_margin=PRINTER_MARGIN,
	regions=LabelRegions(
		header=Region(200.0, 5.0, 82.0, 11.0),
		brand=Region(6.0, 5.0, 190.0, 11.0),
		product=Region(6.0, 17.0, 190.0, 36.0),
		barcode=Region(6.0, 56.0, 150.0, 30.0),
		caption=Region(6.0, 87.0, 150.0, 8.0),
		details=Region(200.0, 20.0, 82.0, 70.0),
		audit=Region(6.0, 97.0, 276.0, 8.0),
	),
	product_font_range=(6.0, 12.0),
	brand_font_range=(6.0, 9.0),
	body_font_size=6.0,
	caption_font_size=6.0,
	audit_font_size=5.0,
	product_name_max_length=45,
	audit_user_max_length=8,
	barcode_separator="-",
)

TWO_UP_OVERSIZE = LabelSpec(
	name="2-up-oversize",
	description="Uline S-21846, 7.75 x 4.75 in, 2 per letter sheet",
	width=inches_to_points(7.75),
	height=inches_to_points(4.75),
	labels_per_sheet=2,
	columns=1,
	rows=2,
	sheet_width=inches_to_points(8.5),
	sheet_height=inches_to_points(11.0),
	content_rotation_degrees=0,
	printer_margin=PRINTER_MARGIN,
	regions=LabelRegions(
		header=Region(393.0, 15.0, 150.0, 18.0),
		brand=Region(15.0, 15.0, 370.0, 30.0),
		product=Region(15.0, 50.0, 528.0, 90.0),
		barcode=Region(15.0, 190.0, 170.0, 80.0),
		caption=Region(15.0, 274.0, 170.0, 16.0),
		details=Region(373.0, 190.0, 170.0, 100.0),
		audit=Region(15.0, 318.0, 528.0, 12.0),
		writing_box=Region(199.0, 190.0, 160.0, 80.0),
	),
	product_font_range=(14.0, 36.0),
	brand_font_range=(12.0, 24.0),
	body_font_size=12.0,
	caption_font_size=14.0,
	audit_font_size=8.0,
	product_name_max_length=90,
	audit_user_max_length=12,
	barcode_separator=" ",
)

FOUR_UP_HORIZONTAL = LabelSpec(
	name="4-up-horizontal",
	description="4 x 3 in, 4 per letter sheet, content upright",
	width=inches_to_points(4.0),
	height=inches_to_points(3.0),
	labels_per_sheet=4,
	columns=2,
	rows=2,
	sheet_width=inches_to_points(8.5),
	sheet_height=inches_to_points(11.0),
	content_rotation_degrees=0,
	printer_margin=PRINTER_MARGIN,
	regions=LabelRegions(
		header=Region(188.0, 10.0, 90.0, 14.0),
		brand=Region(10.0, 10.0, 174.0, 18.0),
		product=Region(10.0, 30.0, 268.0, 62.0),
		barcode=Region(10.0, 100.0, 130.0, 60.0),
		caption=Region(10.0, 162.0, 130.0, 12.0),
		details=Region(148.0, 100.0, 130.0, 74.0),
		audit=Region(10.0, 196.0, 268.0, 10.0),
	),
	product_font_range=(10.0, 20.0),
	brand_font_range=(9.0, 16.0),
	body_font_size=9.0,
	caption_font_size=9.0,
	audit_font_size=6.0,
	product_name_max_length=60,
	audit_user_max_length=8,
	barcode_separator="-",
)

FOUR_UP_ROTATED_LANDSCAPE = LabelSpec(
	name="4-up-rotated-landscape",
	description="Uline S-12212, 4 x 6 in, 4 per legal sheet, landscape content rotated 90 degrees",
	width=inches_to_points(4.0),
	height=inches_to_points(6.0),
	labels_per_sheet=4,
	columns=2,
	rows=2,
	sheet_width=inches_to_points(8.5),
	sheet_height=inches_to_points(14.0),
	content_rotation_degrees=90,
	printer_margin=PRINTER_MARGIN,
	regions=LabelRegions(
		header=Region(287.0, 15.0, 130.0, 16.0),
		brand=Region(15.0, 15.0, 268.0, 26.0),
		product=Region(15.0, 43.0, 362.0, 70.0),
		barcode=Region(15.0, 185.0, 120.0, 50.0),
		caption=Region(15.0, 237.0, 120.0, 12.0),
		details=Region(147.0, 185.0, 270.0, 70.0),
		audit=Region(15.0, 262.0, 402.0, 10.0),
		writing_box=Region(76.0, 128.0, 280.0, 45.0),
	),
	product_font_range=(14.0, 28.0),
	brand_font_range=(16.0, 24.0),
	body_font_size=11.0,
	caption_font_size=11.0,
	audit_font_size=7.0,
	product_name_max_length=80,
	audit_user_max_length=8,
	barcode_separator=" ",
)

LABEL_SPECS = {
	spec.name: validate_label_spec(spec)
	for spec in (
		TWELVE_UP_PORTRAIT,
		TWO_UP_OVERSIZE,
		FOUR_UP_HORIZONTAL,
		FOUR_UP_ROTATED_LANDSCAPE,
	)
}
DEFAULT_LABEL_SPEC = FOUR_UP_ROTATED_LANDSCAPE.name


#============================================
def list_label_specs() -> list[LabelSpec]:
	"""
	List supported label specs in catalog order.

	Returns:
		List of LabelSpec.
	"""
	return list(LABEL_SPECS.values())


#============================================
def get_label_spec(name: str) -> LabelSpec:
	"""
	Look up a label spec by name.

	Args:
		name: Catalog name such as "12-up-portrait".

	Returns:
		LabelSpec.

	Raises:
		ConfigurationError: When the name is unknown.
	"""
	key = (name or "").strip().lower()
	spec = LABEL_SPECS.get(key)
	if spec is None:
		known = ", ".join(LABEL_SPECS)
		raise ConfigurationError(f"unknown label format {name!r} (known: {known})")
	return spec
