"""
Label cell geometry and content transforms.

Cell rectangles use sheet coordinates with the origin at the top-left
corner of the sheet and y growing downward. Content transforms map the
label content frame (origin at its bottom-left corner, y growing upward)
into PDF user space, where the origin is the bottom-left of the page.
"""

# Standard Library
import dataclasses

# PIP3 modules
import pypdf

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.label_specs


LabelSpec = ile.label_specs.LabelSpec

QUARTER_TURNS = {
	0: (1.0, 0.0, 0.0, 1.0, 0.0, 0.0),
	90: (0.0, 1.0, -1.0, 0.0, 0.0, 0.0),
	180: (-1.0, 0.0, 0.0, -1.0, 0.0, 0.0),
	270: (0.0, -1.0, 1.0, 0.0, 0.0, 0.0),
}


@dataclasses.dataclass(frozen=True)
class Rect:
	x: float
	y: float
	width: float
	height: float

	@property
	def right(self) -> float:
		return self.x + self.width

	@property
	def bottom(self) -> float:
		return self.y + self.height

	@property
	def center(self) -> tuple[float, float]:
		return (self.x + self.width / 2.0, self.y + self.height / 2.0)


#============================================
def rects_overlap(rect_a: Rect, rect_b: Rect) -> bool:
	"""
	Check whether two rectangles share interior area.

	Args:
		rect_a: First rectangle.
		rect_b: Second rectangle.

	Returns:
		True if the rectangles overlap; touching edges do not count.
	"""
	left = max(rect_a.x, rect_b.x)
	right = min(rect_a.right, rect_b.right)
	top = max(rect_a.y, rect_b.y)
	bottom = min(rect_a.bottom, rect_b.bottom)
	return right > left and bottom > top


#============================================
def printable_area(spec: LabelSpec) -> Rect:
	"""
	Compute the printable area of the sheet.

	Args:
		spec: Label spec.

	Returns:
		Rect inset by the printer margin on every side.
	"""
	margin = spec.printer_margin
	return Rect(
		x=margin,
		y=margin,
		width=spec.sheet_width - 2.0 * margin,
		height=spec.sheet_height - 2.0 * margin,
	)


#============================================
def grid_bounds(spec: LabelSpec) -> Rect:
	"""
	Compute the label grid rectangle centered in the printable area.

	Args:
		spec: Label spec.

	Returns:
		Rect covering every label cell.
	"""
	area = printable_area(spec)
	grid_width = spec.columns * spec.width + (spec.columns - 1) * spec.column_gap
	grid_height = spec.rows * spec.height + (spec.rows - 1) * spec.row_gap
	return Rect(
		x=area.x + (area.width - grid_width) / 2.0,
		y=area.y + (area.height - grid_height) / 2.0,
		width=grid_width,
		height=grid_height,
	)


#============================================
def position_for(slot_index: int, spec: LabelSpec) -> Rect:
	"""
	Compute the cell rectangle for a slot on the sheet.

	Slots run row-major: left to right, then top to bottom.

	Args:
		slot_index: Slot index within the sheet.
		spec: Label spec.

	Returns:
		Rect of the label cell in sheet coordinates.

	Raises:
		ValueError: When the slot is outside the sheet.
	"""
	if slot_index < 0 or slot_index >= spec.labels_per_sheet:
		raise ValueError(f"slot {slot_index} outside 0..{spec.labels_per_sheet - 1} for {spec.name}")
	grid = grid_bounds(spec)
	row = slot_index // spec.columns
	col = slot_index % spec.columns
	return Rect(
		x=grid.x + col * (spec.width + spec.column_gap),
		y=grid.y + row * (spec.height + spec.row_gap),
		width=spec.width,
		height=spec.height,
	)


#============================================
def content_size(spec: LabelSpec) -> tuple[float, float]:
	"""
	Get the size of the frame label content is authored in.

	Args:
		spec: Label spec.

	Returns:
		Tuple of (width, height); swapped for rotated specs.
	"""
	if spec.content_rotation_degrees in (90, 270):
		return (spec.height, spec.width)
	return (spec.width, spec.height)


#============================================
def rotation_transform(degrees_ccw: float) -> pypdf.Transformation:
	"""
	Build a rotation, exact for quarter turns.

	Args:
		degrees_ccw: Counterclockwise angle in degrees.

	Returns:
		pypdf Transformation.
	"""
	normalized = degrees_ccw % 360
	if normalized in QUARTER_TURNS:
		return pypdf.Transformation(ctm=QUARTER_TURNS[int(normalized)])
	return pypdf.Transformation().rotate(normalized)


#============================================
def build_content_transform(cell: Rect, rotation_degrees: float, sheet_height: float) -> pypdf.Transformation:
	"""
	Build the single transform that places label content on the page.

	The content frame is centered on the origin, rotated clockwise by
	rotation_degrees, then moved to the cell center in PDF user space.

	Args:
		cell: Cell rectangle in sheet coordinates.
		rotation_degrees: Clockwise content rotation, 0 or 90.
		sheet_height: Sheet height, used to flip to a bottom-left origin.

	Returns:
		pypdf Transformation usable as a PDF cm matrix.
	"""
	if rotation_degrees % 180 == 90:
		frame_width, frame_height = cell.height, cell.width
	else:
		frame_width, frame_height = cell.width, cell.height
	center_x, center_y = cell.center
	page_center_y = sheet_height - center_y
	to_origin = pypdf.Transformation().translate(-frame_width / 2.0, -frame_height / 2.0)
	rotate = rotation_transform(-rotation_degrees)
	to_cell = pypdf.Transformation().translate(center_x, page_center_y)
	return to_origin.transform(rotate).transform(to_cell)


#============================================
def transform_bounds(
	transform: pypdf.Transformation,
	width: float,
	height: float,
) -> tuple[float, float, float, float]:
	"""
	Compute the page bounding box of a transformed content frame.

	Args:
		transform: Content transform.
		width: Content frame width.
		height: Content frame height.

	Returns:
		Bounding box (x0, y0, x1, y1) in PDF user space.
	"""
	corners = [(0.0, 0.0), (width, 0.0), (0.0, height), (width, height)]
	points = [transform.apply_on(corner) for corner in corners]
	x_values = [point[0] for point in points]
	y_values = [point[1] for point in points]
	return (min(x_values), min(y_values), max(x_values), max(y_values))


#============================================
def to_pdf_box(cell: Rect, sheet_height: float) -> tuple[float, float, float, float]:
	"""
	Convert a sheet rectangle to a ReportLab rect tuple.

	Args:
		cell: Rect in sheet coordinates.
		sheet_height: Sheet height.

	Returns:
		Tuple of (x, bottom y, width, height) in PDF user space.
	"""
	return (cell.x, sheet_height - cell.bottom, cell.width, cell.height)
