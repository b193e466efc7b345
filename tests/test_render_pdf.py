import datetime
import json
import pathlib

import pypdf
import pytest

import inventory_label_engine.assembler as assembler
import inventory_label_engine.config as config
import inventory_label_engine.errors as errors
import inventory_label_engine.label_specs as label_specs
import inventory_label_engine.models as models
import inventory_label_engine.paginator as paginator
import inventory_label_engine.render as render


DPI = 72
INK_THRESHOLD = 200


#============================================
def build_render_config(**overrides) -> config.RenderConfig:
	"""
	Build a quiet RenderConfig for tests.
	"""
	values = {
		"draw_outlines": False,
		"calibration": False,
		"draw_borders": True,
		"verbose": False,
	}
	values.update(overrides)
	return config.RenderConfig(**values)


#============================================
def build_batch(spec: label_specs.LabelSpec, now: datetime.datetime, copies: int = 5) -> paginator.PaginationResult:
	entries = [
		(
			models.SourceItem(sku="CUR-1001", barcode="CUR1001", product_name="Curaleaf Pink Champagne Capsules"),
			models.EnhancedData(label_quantity=copies, box_count=2, case_quantity=24, harvest_date="07/04/2025"),
		),
		(
			models.SourceItem(sku="bad-sku", barcode="bad value", product_name="Blue Dream"),
			models.EnhancedData(label_quantity=1),
		),
	]
	return paginator.paginate(entries, spec, "tester", now=now)


#============================================
@pytest.mark.parametrize("spec", label_specs.list_label_specs(), ids=lambda spec: spec.name)
def test_render_page_count_and_size(
	spec: label_specs.LabelSpec,
	tmp_path: pathlib.Path,
	fixed_now: datetime.datetime,
) -> None:
	"""
	Ensure one PDF page per sheet at the sheet size.
	"""
	batch = build_batch(spec, fixed_now)
	output_path = tmp_path / "labels.pdf"
	result = render.render_plans_to_pdf(batch.plans, spec, output_path, build_render_config())
	assert output_path.exists()
	reader = pypdf.PdfReader(str(output_path))
	assert len(reader.pages) == batch.pages == result.pages
	page = reader.pages[0]
	assert float(page.mediabox.width) == pytest.approx(spec.sheet_width)
	assert float(page.mediabox.height) == pytest.approx(spec.sheet_height)
	assert result.total_labels == 6
	assert result.invalid_barcodes == 1


#============================================
def test_render_text_content(tmp_path: pathlib.Path, fixed_now: datetime.datetime) -> None:
	"""
	Ensure the label text lands in the PDF.
	"""
	spec = label_specs.FOUR_UP_HORIZONTAL
	batch = build_batch(spec, fixed_now, copies=1)
	output_path = tmp_path / "labels.pdf"
	render.render_plans_to_pdf(batch.plans, spec, output_path, build_render_config())
	text = pypdf.PdfReader(str(output_path)).pages[0].extract_text()
	assert "Curaleaf" in text
	assert "CUR-100-1" in text
	assert "BARCODE ERROR" in text
	assert "07/31/25 2:05 PM (tester)" in text


#============================================
def test_calibration_page_and_outlines(tmp_path: pathlib.Path, fixed_now: datetime.datetime) -> None:
	spec = label_specs.FOUR_UP_ROTATED_LANDSCAPE
	batch = build_batch(spec, fixed_now)
	output_path = tmp_path / "labels.pdf"
	render_config = build_render_config(draw_outlines=True, calibration=True)
	result = render.render_plans_to_pdf(batch.plans, spec, output_path, render_config)
	reader = pypdf.PdfReader(str(output_path))
	assert len(reader.pages) == batch.pages + 1
	assert result.pages == batch.pages + 1
	assert spec.name in reader.pages[0].extract_text()


#============================================
def test_render_rejects_other_format(tmp_path: pathlib.Path, fixed_now: datetime.datetime) -> None:
	batch = build_batch(label_specs.FOUR_UP_HORIZONTAL, fixed_now)
	with pytest.raises(errors.ConfigurationError):
		render.render_plans_to_pdf(
			batch.plans,
			label_specs.TWELVE_UP_PORTRAIT,
			tmp_path / "labels.pdf",
			build_render_config(),
		)


#============================================
def test_render_requires_positions(tmp_path: pathlib.Path, fixed_now: datetime.datetime) -> None:
	spec = label_specs.FOUR_UP_HORIZONTAL
	item = models.SourceItem(sku="A1", barcode="A1", product_name="Blue Dream")
	plans = assembler.assemble(item, models.EnhancedData(), spec, "user", now=fixed_now)
	with pytest.raises(ValueError):
		render.render_plans_to_pdf(plans, spec, tmp_path / "labels.pdf", build_render_config())


#============================================
def test_write_manifest(tmp_path: pathlib.Path, fixed_now: datetime.datetime) -> None:
	"""
	Ensure the manifest is valid JSON with enum values as strings.
	"""
	spec = label_specs.FOUR_UP_ROTATED_LANDSCAPE
	batch = build_batch(spec, fixed_now, copies=2)
	manifest_path = tmp_path / "labels.json"
	render.write_manifest(manifest_path, batch.plans, batch.failures, spec)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["format"] == spec.name
	assert data["total_labels"] == 3
	first = data["labels"][0]
	assert first["brand"]["method"] == "ExactMatch"
	assert first["brand"]["confidence"] == "High"
	assert first["barcode"]["cleaned_value"] == "CUR1001"
	assert first["position"]["page_index"] == 0
	assert first["box"] == "1/2"
	assert data["labels"][2]["barcode"]["is_valid"] is False


#============================================
def test_rotated_page_has_ink_in_every_slot(tmp_path: pathlib.Path, fixed_now: datetime.datetime) -> None:
	"""
	Smoke test the rasterized page: every filled slot has ink.
	"""
	fitz = pytest.importorskip("fitz")
	image_module = pytest.importorskip("PIL.Image")
	spec = label_specs.FOUR_UP_ROTATED_LANDSCAPE
	batch = build_batch(spec, fixed_now, copies=3)
	output_path = tmp_path / "labels.pdf"
	render.render_plans_to_pdf(batch.plans, spec, output_path, build_render_config())

	document = fitz.open(str(output_path))
	page = document[0]
	pixmap = page.get_pixmap(matrix=fitz.Matrix(DPI / 72.0, DPI / 72.0), alpha=False)
	image = image_module.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
	document.close()

	gray = image.convert("L")
	for plan in batch.plans:
		position = plan.position
		box = (
			int(position.x) + 2,
			int(position.y) + 2,
			int(position.x + position.width) - 2,
			int(position.y + position.height) - 2,
		)
		pixels = list(gray.crop(box).getdata())
		ink = sum(1 for value in pixels if value < INK_THRESHOLD)
		assert ink > 0
