"""
CLI entry points for inventory label generation.
"""

# Standard Library
import argparse
import json
import pathlib
import time

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config
import inventory_label_engine.font_fitter
import inventory_label_engine.label_specs
import inventory_label_engine.models
import inventory_label_engine.paginator
import inventory_label_engine.render


RenderConfig = ile.config.RenderConfig
SourceItem = ile.models.SourceItem
EnhancedData = ile.models.EnhancedData

DEFAULT_BRANDS = ile.config.DEFAULT_BRANDS
DEFAULT_LABEL_SPEC = ile.label_specs.DEFAULT_LABEL_SPEC
LABEL_SPECS = ile.label_specs.LABEL_SPECS

ENHANCED_KEYS = ("enhanced_data", "enhancedData", "enhanced")


#============================================
def build_config(args: argparse.Namespace) -> RenderConfig:
	"""
	Build render config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		RenderConfig.
	"""
	return RenderConfig(
		draw_outlines=args.draw_outlines,
		calibration=args.calibration,
		draw_borders=args.draw_borders,
		verbose=True,
	)


#============================================
def build_estimator(mode: str) -> ile.font_fitter.CharWidthEstimator:
	"""
	Pick the text measurement strategy.

	Args:
		mode: "estimate" or "metrics".

	Returns:
		Estimator instance.
	"""
	if mode == "metrics":
		return ile.font_fitter.FontMetricsEstimator()
	return ile.font_fitter.CharWidthEstimator(bold=True)


#============================================
def load_brand_file(path: pathlib.Path) -> tuple[str, ...]:
	"""
	Read a brand dictionary, one brand per line.

	Blank lines and lines starting with # are skipped.

	Args:
		path: Text file path.

	Returns:
		Ordered tuple of brand names.
	"""
	brands: list[str] = []
	with path.open("r", encoding="utf-8") as handle:
		for raw_line in handle:
			line = raw_line.strip()
			if not line or line.startswith("#"):
				continue
			brands.append(line)
	return tuple(brands)


#============================================
def parse_batch(data) -> tuple[list[tuple[SourceItem, EnhancedData]], str | None]:
	"""
	Convert decoded batch JSON into (item, metadata) pairs.

	The batch is either a list of item records or an object with an
	"items" list and an optional "user". Per-item metadata sits under
	"enhanced_data" or directly on the item record.

	Args:
		data: Decoded JSON value.

	Returns:
		Tuple of (entries, user from the file or None).

	Raises:
		ValueError: When the JSON has no item list.
	"""
	user = None
	records = data
	if isinstance(data, dict):
		records = data.get("items")
		user = data.get("user")
	if not isinstance(records, list):
		raise ValueError("batch JSON must be a list of items or an object with an 'items' list")

	entries: list[tuple[SourceItem, EnhancedData]] = []
	for record in records:
		if not isinstance(record, dict):
			raise ValueError(f"batch item must be an object, got {type(record).__name__}")
		enhanced = record
		for key in ENHANCED_KEYS:
			if isinstance(record.get(key), dict):
				enhanced = record[key]
				break
		entries.append((SourceItem.from_dict(record), EnhancedData.from_dict(enhanced)))
	return (entries, user)


#============================================
def load_batch(path: pathlib.Path) -> tuple[list[tuple[SourceItem, EnhancedData]], str | None]:
	"""
	Load a batch JSON file.

	Args:
		path: JSON file path.

	Returns:
		Tuple of (entries, user from the file or None).
	"""
	with path.open("r", encoding="utf-8") as handle:
		data = json.load(handle)
	return parse_batch(data)


#============================================
def print_formats() -> None:
	"""
	Print the supported label formats.
	"""
	for spec in ile.label_specs.list_label_specs():
		print(
			f"{spec.name:<24} {spec.labels_per_sheet:>2} per sheet  "
			f"{spec.width:.0f}x{spec.height:.0f} pt  {spec.description}"
		)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Generate printable inventory label sheets from a JSON batch.")
	parser.add_argument("batch", nargs="?", default=None, help="Batch JSON file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default="labels.pdf", help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"-f", "--format",
		dest="format_name",
		choices=list(LABEL_SPECS),
		default=DEFAULT_LABEL_SPEC,
		help="Label sheet format.",
	)
	layout_group.add_argument(
		"--measure",
		dest="measure",
		choices=("estimate", "metrics"),
		default="estimate",
		help="Text width model used for font fitting.",
	)
	layout_group.add_argument("--list-formats", dest="list_formats", action="store_true", help="List label formats and exit.")

	content_group = parser.add_argument_group("Content")
	content_group.add_argument("-u", "--user", dest="user", default=None, help="Username printed on the audit line.")
	content_group.add_argument("-b", "--brands", dest="brand_file", default=None, help="Brand list file, one per line.")
	content_group.add_argument(
		"--no-fallback-barcode",
		dest="allow_fallback",
		action="store_false",
		help="Do not generate a barcode value for items without barcode or SKU.",
	)

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-d", "--draw-outlines", dest="draw_outlines", action="store_true", help="Draw slot outlines.")
	behavior_group.add_argument("-D", "--no-draw-outlines", dest="draw_outlines", action="store_false", help="Disable slot outlines.")
	behavior_group.add_argument("-c", "--calibration", dest="calibration", action="store_true", help="Add a calibration page.")
	behavior_group.add_argument("-C", "--no-calibration", dest="calibration", action="store_false", help="Disable calibration page.")
	behavior_group.add_argument("--no-borders", dest="draw_borders", action="store_false", help="Do not draw label borders.")
	behavior_group.add_argument(
		"--stop-before-rendering",
		dest="stop_before_rendering",
		action="store_true",
		help="Stop after planning labels (skip PDF output).",
	)

	parser.set_defaults(
		draw_outlines=False,
		calibration=False,
		draw_borders=True,
		allow_fallback=True,
		stop_before_rendering=False,
	)

	args = parser.parse_args(argv)
	if args.batch is None and not args.list_formats:
		parser.error("a batch JSON file is required")
	return args


#============================================
def run_pipeline(args: argparse.Namespace) -> ile.paginator.PaginationResult:
	"""
	Run the pipeline from batch JSON to label PDF.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PaginationResult of the batch.
	"""
	print("Inventory label pipeline")
	print(f"Format: {args.format_name}")
	print(f"Output PDF: {args.output_path}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")
	print(f"Measure: {args.measure}")
	print(f"Draw outlines: {args.draw_outlines}")
	print(f"Calibration: {args.calibration}")
	if args.stop_before_rendering:
		print("Stop before rendering: True")

	spec = ile.label_specs.get_label_spec(args.format_name)
	brands = DEFAULT_BRANDS
	if args.brand_file:
		brands = load_brand_file(pathlib.Path(args.brand_file))
		print(f"Brands loaded: {len(brands)}")

	start_time = time.perf_counter()
	entries, file_user = load_batch(pathlib.Path(args.batch))
	user = args.user or file_user
	print(f"Items loaded: {len(entries)}")

	plan_start = time.perf_counter()
	result = ile.paginator.paginate(
		entries,
		spec,
		user,
		brand_dictionary=brands,
		allow_fallback=args.allow_fallback,
		estimator=build_estimator(args.measure),
		verbose=True,
	)
	plan_end = time.perf_counter()
	print(f"Labels planned: {result.total_labels}")
	print(f"Sheets needed: {result.pages}")
	for failure in result.failures:
		print(f"Item {failure.index} ({failure.sku or 'no SKU'}) skipped: {failure.message}")
	warned = [plan for plan in result.plans if plan.copy_index == 0 and plan.warnings]
	for plan in warned:
		for warning in plan.warnings:
			print(f"Warning {plan.item.sku or plan.content.product_name}: {warning}")

	if args.stop_before_rendering:
		print("Stopping before rendering.")
		print(f"Timing: plan={plan_end - plan_start:.2f}s total={time.perf_counter() - start_time:.2f}s")
		return result

	output_path = pathlib.Path(args.output_path)
	render_result = None
	render_start = time.perf_counter()
	if result.plans:
		render_result = ile.render.render_plans_to_pdf(result.plans, spec, output_path, build_config(args))
		print(f"Pages written: {render_result.pages}")
		if render_result.invalid_barcodes:
			print(f"Labels with barcode errors: {render_result.invalid_barcodes}")
		if render_result.overflow_labels:
			print(f"Labels with text overflow: {render_result.overflow_labels}")
	else:
		print("No labels to render.")
	render_end = time.perf_counter()

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	ile.render.write_manifest(pathlib.Path(manifest_path), result.plans, result.failures, spec, render_result)

	print(
		"Timing: plan={:.2f}s render={:.2f}s total={:.2f}s".format(
			plan_end - plan_start,
			render_end - render_start,
			time.perf_counter() - start_time,
		)
	)
	print(f"Manifest written: {manifest_path}")
	return result


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	if args.list_formats:
		print_formats()
		return
	run_pipeline(args)
