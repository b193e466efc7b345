"""
PDF rendering of positioned label plans.
"""

# Standard Library
import contextlib
import dataclasses
import enum
import io
import json
import pathlib

# PIP3 modules
import pypdf
import reportlab.graphics.barcode.code39
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config
import inventory_label_engine.errors
import inventory_label_engine.label_specs
import inventory_label_engine.models
import inventory_label_engine.sheet_geometry


LabelSpec = ile.label_specs.LabelSpec
Region = ile.label_specs.Region
RenderPlan = ile.models.RenderPlan
ItemFailure = ile.models.ItemFailure
BarcodeSymbol = ile.models.BarcodeSymbol
Rect = ile.sheet_geometry.Rect
RenderConfig = ile.config.RenderConfig
ConfigurationError = ile.errors.ConfigurationError

POINTS_PER_INCH = ile.config.POINTS_PER_INCH
DEFAULT_FONT_REGULAR = ile.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = ile.config.DEFAULT_FONT_BOLD
DEFAULT_FONT_MONO_BOLD = ile.config.DEFAULT_FONT_MONO_BOLD
LINE_HEIGHT_FACTOR = ile.config.LINE_HEIGHT_FACTOR
DATE_PLACEHOLDER = ile.config.DATE_PLACEHOLDER
PROGRESS_BAR_WIDTH = ile.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = ile.config.PROGRESS_UPDATE_EVERY
BORDER_LINE_WIDTH = ile.config.BORDER_LINE_WIDTH
OUTLINE_LINE_WIDTH = ile.config.OUTLINE_LINE_WIDTH
WRITING_BOX_LINE_COUNT = ile.config.WRITING_BOX_LINE_COUNT
BARCODE_QUIET_FRACTION = ile.config.BARCODE_QUIET_FRACTION

EMPTY_FIELD = "___"


@dataclasses.dataclass
class RenderResult:
	total_labels: int
	pages: int
	labels_per_page: int
	invalid_barcodes: int
	overflow_labels: int


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def region_box(region: Region, frame_height: float) -> tuple[float, float, float, float]:
	"""
	Convert a top-left region to a bottom-left box in the content frame.

	Args:
		region: Region measured from the top-left of the content frame.
		frame_height: Content frame height.

	Returns:
		Tuple of (x, bottom y, width, height).
	"""
	return (region.x, frame_height - region.y - region.height, region.width, region.height)


#============================================
def plan_cell(plan: RenderPlan) -> Rect:
	"""
	Get the sheet cell of a positioned plan.

	Args:
		plan: Render plan with a position.

	Returns:
		Rect in sheet coordinates.

	Raises:
		ValueError: When the plan has not been paginated.
	"""
	position = plan.position
	if position is None:
		raise ValueError(f"plan for {plan.item.sku or plan.content.product_name!r} has no sheet position")
	return Rect(x=position.x, y=position.y, width=position.width, height=position.height)


#============================================
@contextlib.contextmanager
def label_frame(pdf: reportlab.pdfgen.canvas.Canvas, transform: pypdf.Transformation):
	"""
	Apply one content transform for the duration of a label.

	Args:
		pdf: ReportLab canvas.
		transform: Content transform from sheet_geometry.
	"""
	pdf.saveState()
	try:
		pdf.transform(*transform.ctm)
		yield pdf
	finally:
		pdf.restoreState()


#============================================
@contextlib.contextmanager
def clipped(pdf: reportlab.pdfgen.canvas.Canvas, box: tuple[float, float, float, float]):
	pdf.saveState()
	try:
		path = pdf.beginPath()
		path.rect(*box)
		pdf.clipPath(path, stroke=0, fill=0)
		yield pdf
	finally:
		pdf.restoreState()


#============================================
def draw_text_lines(
	pdf: reportlab.pdfgen.canvas.Canvas,
	lines: tuple[str, ...] | list[str],
	box: tuple[float, float, float, float],
	font_name: str,
	font_size: float,
	align: str = "LEFT",
) -> None:
	"""
	Draw lines of text from the top of a box downward.

	Args:
		pdf: ReportLab canvas.
		lines: Text lines.
		box: Box (x, bottom y, width, height).
		font_name: ReportLab font name.
		font_size: Font size in points.
		align: LEFT, CENTER or RIGHT.
	"""
	x, y, width, height = box
	leading = font_size * LINE_HEIGHT_FACTOR
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	pdf.setFont(font_name, font_size)
	baseline = y + height - ascent
	for line in lines:
		if align == "CENTER":
			pdf.drawCentredString(x + width / 2.0, baseline, line)
		elif align == "RIGHT":
			pdf.drawRightString(x + width, baseline, line)
		else:
			pdf.drawString(x, baseline, line)
		baseline -= leading


#============================================
def draw_barcode(
	pdf: reportlab.pdfgen.canvas.Canvas,
	symbol: BarcodeSymbol,
	box: tuple[float, float, float, float],
) -> bool:
	"""
	Draw a Code 39 symbol scaled to a box, or an error placeholder.

	The symbol is measured at a bar width of 1 point, then rebuilt with
	the bar width that fills the box minus quiet zones.

	Args:
		pdf: ReportLab canvas.
		symbol: Validated barcode symbol.
		box: Box (x, bottom y, width, height).

	Returns:
		True if bars were drawn.
	"""
	x, y, width, height = box
	if not symbol.is_valid:
		draw_barcode_error(pdf, symbol, box)
		return False
	quiet = width * BARCODE_QUIET_FRACTION
	usable_width = width - 2.0 * quiet
	probe = reportlab.graphics.barcode.code39.Standard39(
		symbol.cleaned_value,
		barWidth=1.0,
		barHeight=height,
		checksum=0,
		quiet=0,
	)
	bar_width = usable_width / probe.width
	barcode = reportlab.graphics.barcode.code39.Standard39(
		symbol.cleaned_value,
		barWidth=bar_width,
		barHeight=height,
		checksum=0,
		quiet=0,
	)
	offset = (usable_width - barcode.width) / 2.0
	barcode.drawOn(pdf, x + quiet + max(0.0, offset), y)
	return True


#============================================
def draw_barcode_error(
	pdf: reportlab.pdfgen.canvas.Canvas,
	symbol: BarcodeSymbol,
	box: tuple[float, float, float, float],
) -> None:
	x, y, width, height = box
	pdf.saveState()
	pdf.setStrokeColorRGB(0.8, 0.0, 0.0)
	pdf.setFillColorRGB(0.8, 0.0, 0.0)
	pdf.setLineWidth(BORDER_LINE_WIDTH)
	pdf.rect(x, y, width, height, stroke=1, fill=0)
	font_size = min(10.0, height / 4.0)
	lines = ["BARCODE ERROR"]
	if symbol.error_message:
		lines.append(symbol.error_message)
	with clipped(pdf, box):
		draw_text_lines(
			pdf,
			lines,
			(x + 2.0, y, width - 4.0, height - 2.0),
			DEFAULT_FONT_BOLD,
			font_size,
		)
	pdf.restoreState()


#============================================
def draw_writing_box(
	pdf: reportlab.pdfgen.canvas.Canvas,
	box: tuple[float, float, float, float],
	font_size: float,
) -> None:
	"""
	Draw the hand-writing box with its caption and ruled lines.

	Args:
		pdf: ReportLab canvas.
		box: Box (x, bottom y, width, height).
		font_size: Caption font size.
	"""
	x, y, width, height = box
	pdf.setLineWidth(OUTLINE_LINE_WIDTH * 2.0)
	pdf.rect(x, y, width, height, stroke=1, fill=0)
	pdf.setFont(DEFAULT_FONT_BOLD, font_size)
	pdf.drawString(x, y + height + 2.0, "Store:")
	row_height = height / WRITING_BOX_LINE_COUNT
	pdf.setLineWidth(OUTLINE_LINE_WIDTH)
	for index in range(1, WRITING_BOX_LINE_COUNT):
		line_y = y + index * row_height
		pdf.line(x + 8.0, line_y, x + width - 8.0, line_y)


#============================================
def detail_lines(plan: RenderPlan) -> list[str]:
	"""
	Build the detail column text for a label.

	Args:
		plan: Render plan.

	Returns:
		Lines in display priority order.
	"""
	content = plan.content
	lines = [
		f"Harvest: {content.harvest_date or DATE_PLACEHOLDER}",
		f"Package: {content.packaged_date or DATE_PLACEHOLDER}",
		f"Case: {content.case_quantity or EMPTY_FIELD}",
		f"Box {plan.box_number}/{plan.total_boxes}",
	]
	if content.size:
		lines.append(f"Size: {content.size}")
	if content.strain:
		lines.append(f"Strain: {content.strain}")
	if content.location:
		lines.append(f"Loc: {content.location}")
	if content.sku:
		lines.append(f"SKU: {content.sku}")
	return lines


#============================================
def draw_label(
	pdf: reportlab.pdfgen.canvas.Canvas,
	plan: RenderPlan,
	spec: LabelSpec,
	config: RenderConfig,
) -> bool:
	"""
	Draw one label inside its content frame.

	Args:
		pdf: ReportLab canvas already transformed to the content frame.
		plan: Render plan.
		spec: Label spec.
		config: Render configuration.

	Returns:
		True if the barcode bars were drawn.
	"""
	frame_width, frame_height = ile.sheet_geometry.content_size(spec)
	regions = spec.regions
	content = plan.content

	if config.draw_borders:
		pdf.setLineWidth(BORDER_LINE_WIDTH)
		pdf.rect(0.0, 0.0, frame_width, frame_height, stroke=1, fill=0)

	draw_text_lines(
		pdf,
		[content.source],
		region_box(regions.header, frame_height),
		DEFAULT_FONT_BOLD,
		spec.body_font_size,
		align="RIGHT",
	)

	if content.brand_lines and plan.font_sizes.brand is not None:
		box = region_box(regions.brand, frame_height)
		with clipped(pdf, box):
			draw_text_lines(pdf, content.brand_lines, box, DEFAULT_FONT_BOLD, plan.font_sizes.brand, align="CENTER")

	box = region_box(regions.product, frame_height)
	with clipped(pdf, box):
		draw_text_lines(pdf, content.product_lines, box, DEFAULT_FONT_BOLD, plan.font_sizes.product, align="CENTER")

	if regions.writing_box is not None:
		draw_writing_box(pdf, region_box(regions.writing_box, frame_height), spec.body_font_size)

	drawn = draw_barcode(pdf, plan.barcode, region_box(regions.barcode, frame_height))
	if plan.barcode.is_valid:
		draw_text_lines(
			pdf,
			[plan.barcode.display_grouped],
			region_box(regions.caption, frame_height),
			DEFAULT_FONT_MONO_BOLD,
			spec.caption_font_size,
			align="CENTER",
		)

	box = region_box(regions.details, frame_height)
	leading = spec.body_font_size * LINE_HEIGHT_FACTOR
	max_lines = max(1, int(box[3] // leading))
	with clipped(pdf, box):
		draw_text_lines(pdf, detail_lines(plan)[:max_lines], box, DEFAULT_FONT_REGULAR, spec.body_font_size)

	draw_text_lines(
		pdf,
		[plan.audit_string],
		region_box(regions.audit, frame_height),
		DEFAULT_FONT_REGULAR,
		spec.audit_font_size,
	)
	return drawn


#============================================
def draw_label_outlines(pdf: reportlab.pdfgen.canvas.Canvas, spec: LabelSpec) -> None:
	"""
	Draw every slot outline of a sheet.

	Args:
		pdf: ReportLab canvas.
		spec: Label spec.
	"""
	pdf.setLineWidth(OUTLINE_LINE_WIDTH)
	pdf.setStrokeColorRGB(0.7, 0.7, 0.7)
	for slot_index in range(spec.labels_per_sheet):
		cell = ile.sheet_geometry.position_for(slot_index, spec)
		pdf.rect(*ile.sheet_geometry.to_pdf_box(cell, spec.sheet_height), stroke=1, fill=0)


#============================================
def _canvas_page(spec: LabelSpec, draw) -> pypdf.PageObject:
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(spec.sheet_width, spec.sheet_height))
	draw(pdf)
	pdf.save()
	buffer.seek(0)
	reader = pypdf.PdfReader(buffer)
	return reader.pages[0]


#============================================
def build_outline_overlay(spec: LabelSpec) -> pypdf.PageObject:
	"""
	Build a PDF overlay page with slot outlines.

	Args:
		spec: Label spec.

	Returns:
		PDF page object.
	"""
	return _canvas_page(spec, lambda pdf: draw_label_outlines(pdf, spec))


#============================================
def draw_calibration_page(pdf: reportlab.pdfgen.canvas.Canvas, spec: LabelSpec) -> None:
	"""
	Draw slot outlines, center crosses and a 1 inch ruler mark.

	Args:
		pdf: ReportLab canvas.
		spec: Label spec.
	"""
	draw_label_outlines(pdf, spec)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.setLineWidth(0.6)
	size = 6.0
	for slot_index in range(spec.labels_per_sheet):
		cell = ile.sheet_geometry.position_for(slot_index, spec)
		center_x, center_y = cell.center
		center_y = spec.sheet_height - center_y
		pdf.line(center_x - size, center_y, center_x + size, center_y)
		pdf.line(center_x, center_y - size, center_x, center_y + size)

	grid = ile.sheet_geometry.grid_bounds(spec)
	ruler_x = grid.x
	ruler_y = spec.sheet_height - spec.printer_margin / 2.0
	pdf.line(ruler_x, ruler_y, ruler_x + POINTS_PER_INCH, ruler_y)
	pdf.setFont(DEFAULT_FONT_REGULAR, 6)
	pdf.drawString(ruler_x + POINTS_PER_INCH + 4.0, ruler_y - 2.0, f"1 in  {spec.name}")


#============================================
def build_calibration_page(spec: LabelSpec) -> pypdf.PageObject:
	"""
	Build a calibration page PDF.

	Args:
		spec: Label spec.

	Returns:
		PDF page object.
	"""
	return _canvas_page(spec, lambda pdf: draw_calibration_page(pdf, spec))


#============================================
def render_plans_to_pdf(
	plans: list[RenderPlan],
	spec: LabelSpec,
	output_path: pathlib.Path,
	config: RenderConfig,
) -> RenderResult:
	"""
	Render positioned plans to a multi-page PDF.

	Args:
		plans: Plans from the paginator, in page then slot order.
		spec: Label spec the plans were built for.
		output_path: Output PDF path.
		config: Render configuration.

	Returns:
		RenderResult.

	Raises:
		ConfigurationError: When a plan was built for another format.
		ValueError: When a plan has no sheet position.
	"""
	for plan in plans:
		if plan.spec_name != spec.name:
			raise ConfigurationError(f"plan built for {plan.spec_name!r}, rendering {spec.name!r}")

	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(spec.sheet_width, spec.sheet_height))
	pdf.setTitle(f"Inventory labels ({spec.name})")

	total = len(plans)
	invalid_barcodes = 0
	overflow_labels = 0
	current_page = 0
	if config.verbose and total > 0:
		print_progress("Labels", 0, total)
	for index, plan in enumerate(plans, start=1):
		cell = plan_cell(plan)
		while current_page < plan.position.page_index:
			pdf.showPage()
			current_page += 1
		transform = ile.sheet_geometry.build_content_transform(
			cell,
			plan.position.rotation_degrees,
			spec.sheet_height,
		)
		with label_frame(pdf, transform):
			if not draw_label(pdf, plan, spec, config):
				invalid_barcodes += 1
		if any("overflows" in warning for warning in plan.warnings):
			overflow_labels += 1
		if config.verbose and (index % PROGRESS_UPDATE_EVERY == 0 or index == total):
			print_progress("Labels", index, total)
	if config.verbose and total > 0:
		print()
	pdf.save()
	buffer.seek(0)

	writer = pypdf.PdfWriter()
	if config.calibration:
		writer.add_page(build_calibration_page(spec))
	outline_page = None
	if config.draw_outlines:
		outline_page = build_outline_overlay(spec)
	label_pages = 0
	if total > 0:
		reader = pypdf.PdfReader(buffer)
		for page in reader.pages:
			if outline_page is not None:
				page.merge_page(outline_page)
			writer.add_page(page)
			label_pages += 1
	writer.write(str(output_path))

	pages = label_pages
	if config.calibration:
		pages += 1
	return RenderResult(
		total_labels=total,
		pages=pages,
		labels_per_page=spec.labels_per_sheet,
		invalid_barcodes=invalid_barcodes,
		overflow_labels=overflow_labels,
	)


#============================================
def _json_default(value):
	if isinstance(value, enum.Enum):
		return value.value
	raise TypeError(f"cannot serialize {type(value).__name__}")


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	plans: list[RenderPlan],
	failures: list[ItemFailure],
	spec: LabelSpec,
	result: RenderResult | None = None,
) -> None:
	"""
	Write a manifest JSON file describing every planned label.

	Args:
		manifest_path: Output path.
		plans: Render plans.
		failures: Items skipped by the paginator.
		spec: Label spec.
		result: Render result, None when nothing was rendered.
	"""
	data = {
		"format": spec.name,
		"labels_per_page": spec.labels_per_sheet,
		"total_labels": len(plans),
		"failures": [dataclasses.asdict(failure) for failure in failures],
		"labels": [
			{
				"sku": plan.item.sku,
				"copy_index": plan.copy_index,
				"box": f"{plan.box_number}/{plan.total_boxes}",
				"brand": dataclasses.asdict(plan.brand_info),
				"font_sizes": dataclasses.asdict(plan.font_sizes),
				"barcode": dataclasses.asdict(plan.barcode),
				"audit": plan.audit_string,
				"position": None if plan.position is None else dataclasses.asdict(plan.position),
				"warnings": list(plan.warnings),
			}
			for plan in plans
		],
		"layout": {
			"label_width": spec.width,
			"label_height": spec.height,
			"columns": spec.columns,
			"rows": spec.rows,
			"sheet_width": spec.sheet_width,
			"sheet_height": spec.sheet_height,
			"printer_margin": spec.printer_margin,
			"content_rotation_degrees": spec.content_rotation_degrees,
		},
	}
	if result is not None:
		data["pages"] = result.pages
		data["invalid_barcodes"] = result.invalid_barcodes
		data["overflow_labels"] = result.overflow_labels
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True, default=_json_default)
