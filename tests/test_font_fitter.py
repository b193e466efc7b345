import pytest

import inventory_label_engine.font_fitter as font_fitter


SAMPLE_TEXTS = [
	"Pink Champagne Capsules",
	"Blue Dream Live Resin Cartridge Full Spectrum 1g",
	"Supercalifragilisticexpialidocious Extra Long Single Word Product",
	"OG",
]


#============================================
def test_short_text_gets_max_size() -> None:
	result = font_fitter.fit("OG Kush", 400.0, 100.0, 10.0, 28.0)
	assert result.font_size == 28.0
	assert result.fits
	assert result.estimated_line_count == 1
	assert result.lines == ("OG Kush",)


#============================================
def test_long_text_shrinks() -> None:
	"""
	Ensure long text is fitted below the maximum size.
	"""
	text = SAMPLE_TEXTS[1]
	result = font_fitter.fit(text, 200.0, 40.0, 6.0, 24.0)
	assert result.fits
	assert 6.0 <= result.font_size < 24.0
	estimator = font_fitter.CharWidthEstimator(bold=True)
	assert result.estimated_line_count * estimator.estimate_line_height(result.font_size) <= 40.0


#============================================
def test_overflow_reports_min_size() -> None:
	"""
	Ensure text that cannot fit returns the minimum size with fits False.
	"""
	text = "word " * 200
	result = font_fitter.fit(text, 100.0, 20.0, 8.0, 16.0)
	assert result.font_size == 8.0
	assert not result.fits
	assert result.estimated_line_count > 1


#============================================
def test_empty_text_fits() -> None:
	result = font_fitter.fit("", 100.0, 20.0, 8.0, 16.0)
	assert result.fits
	assert result.estimated_line_count == 0


#============================================
def test_size_always_within_range() -> None:
	for text in SAMPLE_TEXTS:
		for width, height in ((50.0, 10.0), (150.0, 40.0), (400.0, 120.0)):
			result = font_fitter.fit(text, width, height, 8.0, 20.0)
			assert 8.0 <= result.font_size <= 20.0


#============================================
@pytest.mark.parametrize("text", SAMPLE_TEXTS)
def test_fit_is_monotonic_in_box_size(text: str) -> None:
	"""
	Ensure shrinking the box never increases the chosen size.
	"""
	widths = [400.0, 300.0, 220.0, 150.0, 90.0, 40.0]
	heights = [120.0, 80.0, 50.0, 30.0, 15.0]
	for height in heights:
		previous = None
		for width in widths:
			size = font_fitter.fit(text, width, height, 6.0, 28.0).font_size
			if previous is not None:
				assert size <= previous
			previous = size
	for width in widths:
		previous = None
		for height in heights:
			size = font_fitter.fit(text, width, height, 6.0, 28.0).font_size
			if previous is not None:
				assert size <= previous
			previous = size


#============================================
def naive_fit(text: str, width: float, height: float, min_size: float, max_size: float) -> float:
	"""
	Plain top-down search without pruning.
	"""
	estimator = font_fitter.CharWidthEstimator(bold=True)
	size = max_size
	while size > min_size:
		_, layout_height = font_fitter.estimate_layout(text, width, size, estimator)
		if layout_height <= height:
			return size
		size -= 1.0
	return min_size


#============================================
@pytest.mark.parametrize("text", SAMPLE_TEXTS)
def test_pruned_search_matches_naive(text: str) -> None:
	for width, height in ((60.0, 12.0), (180.0, 36.0), (362.0, 70.0), (528.0, 90.0)):
		result = font_fitter.fit(text, width, height, 6.0, 36.0)
		assert result.font_size == naive_fit(text, width, height, 6.0, 36.0)


#============================================
def test_wrap_text_splits_long_words() -> None:
	assert font_fitter.wrap_text("abcdefghij kl", 4) == ["abcd", "efgh", "ij", "kl"]
	assert font_fitter.wrap_text("one two three", 7) == ["one two", "three"]
	assert font_fitter.wrap_text("   ", 5) == []


#============================================
def test_candidate_sizes_bounded() -> None:
	sizes = font_fitter.candidate_sizes(14.0, 28.0)
	assert sizes[0] == 28.0
	assert sizes[-1] == 14.0
	assert len(sizes) == 15


#============================================
def test_estimators() -> None:
	"""
	Ensure both measurement strategies give positive widths.
	"""
	bold = font_fitter.CharWidthEstimator(bold=True)
	regular = font_fitter.CharWidthEstimator(bold=False)
	assert bold.estimate_char_width(10.0) > regular.estimate_char_width(10.0)
	metrics = font_fitter.FontMetricsEstimator()
	assert 0.0 < metrics.estimate_char_width(10.0) < 10.0
	result = font_fitter.fit(SAMPLE_TEXTS[1], 200.0, 40.0, 6.0, 24.0, estimator=metrics)
	assert 6.0 <= result.font_size <= 24.0
