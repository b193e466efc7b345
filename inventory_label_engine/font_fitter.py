"""
Largest-font search for wrapped text inside a bounding box.
"""

# Standard Library
import dataclasses
import math

# PIP3 modules
import reportlab.pdfbase.pdfmetrics

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config


BOLD_CHAR_WIDTH_FACTOR = ile.config.BOLD_CHAR_WIDTH_FACTOR
REGULAR_CHAR_WIDTH_FACTOR = ile.config.REGULAR_CHAR_WIDTH_FACTOR
LINE_HEIGHT_FACTOR = ile.config.LINE_HEIGHT_FACTOR
FONT_STEP = ile.config.FONT_STEP
METRICS_SAMPLE_TEXT = ile.config.METRICS_SAMPLE_TEXT
DEFAULT_FONT_BOLD = ile.config.DEFAULT_FONT_BOLD


@dataclasses.dataclass(frozen=True)
class FontFitResult:
	font_size: float
	estimated_line_count: int
	fits: bool
	lines: tuple[str, ...] = ()


class CharWidthEstimator:
	"""
	Fixed-ratio character width model, no font files needed.
	"""

	def __init__(self, bold: bool = True, line_height_factor: float = LINE_HEIGHT_FACTOR) -> None:
		if bold:
			self.factor = BOLD_CHAR_WIDTH_FACTOR
		else:
			self.factor = REGULAR_CHAR_WIDTH_FACTOR
		self.line_height_factor = line_height_factor

	def estimate_char_width(self, font_size: float) -> float:
		return font_size * self.factor

	def estimate_line_height(self, font_size: float) -> float:
		return font_size * self.line_height_factor


class FontMetricsEstimator(CharWidthEstimator):
	"""
	Character width model derived from ReportLab glyph metrics.

	The factor is the mean advance width of a mixed sample string, so the
	search logic stays the same while widths track the real font.
	"""

	def __init__(
		self,
		font_name: str = DEFAULT_FONT_BOLD,
		line_height_factor: float = LINE_HEIGHT_FACTOR,
	) -> None:
		super().__init__(bold=True, line_height_factor=line_height_factor)
		self.font_name = font_name
		sample_width = reportlab.pdfbase.pdfmetrics.stringWidth(METRICS_SAMPLE_TEXT, font_name, 1.0)
		self.factor = sample_width / len(METRICS_SAMPLE_TEXT)


#============================================
def chars_per_line(box_width: float, char_width: float) -> int:
	"""
	Compute how many characters fit on one line.

	Args:
		box_width: Line width.
		char_width: Estimated character width.

	Returns:
		Character capacity, at least 1.
	"""
	if char_width <= 0:
		return 1
	# small epsilon so exact multiples are not lost to float error
	return max(1, int(math.floor(box_width / char_width + 1e-9)))


#============================================
def wrap_text(text: str, max_chars: int) -> list[str]:
	"""
	Greedy word wrap on a character budget.

	Words longer than a line are split across lines.

	Args:
		text: Text to wrap.
		max_chars: Characters per line.

	Returns:
		List of lines, empty for blank text.
	"""
	max_chars = max(1, max_chars)
	lines: list[str] = []
	current = ""
	for word in text.split():
		while len(word) > max_chars:
			if current:
				lines.append(current)
				current = ""
			lines.append(word[:max_chars])
			word = word[max_chars:]
		if not word:
			continue
		if not current:
			current = word
		elif len(current) + 1 + len(word) <= max_chars:
			current = f"{current} {word}"
		else:
			lines.append(current)
			current = word
	if current:
		lines.append(current)
	return lines


#============================================
def candidate_sizes(min_size: float, max_size: float) -> list[float]:
	"""
	List font sizes from max_size down to min_size in unit steps.

	Args:
		min_size: Smallest allowed size.
		max_size: Largest allowed size.

	Returns:
		Descending sizes, always ending at min_size.
	"""
	if max_size < min_size:
		max_size = min_size
	sizes: list[float] = []
	size = max_size
	while size > min_size:
		sizes.append(size)
		size -= FONT_STEP
	sizes.append(min_size)
	return sizes


#============================================
def cannot_fit(text: str, box_width: float, box_height: float, font_size: float, estimator: CharWidthEstimator) -> bool:
	"""
	Cheap lower bound test that proves a size cannot fit.

	Every line holds at most max_chars characters and each line break
	consumes at most one space, so lines >= (len + 1) / (max_chars + 1).

	Args:
		text: Normalized text.
		box_width: Box width.
		box_height: Box height.
		font_size: Size under test.
		estimator: Measurement strategy.

	Returns:
		True only when the size certainly overflows.
	"""
	max_chars = chars_per_line(box_width, estimator.estimate_char_width(font_size))
	min_lines = math.ceil((len(text) + 1) / (max_chars + 1))
	return min_lines * estimator.estimate_line_height(font_size) > box_height


#============================================
def estimate_layout(text: str, box_width: float, font_size: float, estimator: CharWidthEstimator) -> tuple[list[str], float]:
	"""
	Estimate wrapped lines and total height at a font size.

	Args:
		text: Normalized text.
		box_width: Box width.
		font_size: Font size.
		estimator: Measurement strategy.

	Returns:
		Tuple of (lines, total height).
	"""
	max_chars = chars_per_line(box_width, estimator.estimate_char_width(font_size))
	lines = wrap_text(text, max_chars)
	height = len(lines) * estimator.estimate_line_height(font_size)
	return (lines, height)


#============================================
def fit(
	text: str,
	box_width: float,
	box_height: float,
	min_size: float,
	max_size: float,
	estimator: CharWidthEstimator | None = None,
) -> FontFitResult:
	"""
	Find the largest font size whose wrapped text fits the box.

	Args:
		text: Text to fit.
		box_width: Box width in points.
		box_height: Box height in points.
		min_size: Minimum font size.
		max_size: Maximum font size.
		estimator: Measurement strategy, bold fixed-ratio by default.

	Returns:
		FontFitResult; fits is False when even min_size overflows.
	"""
	if estimator is None:
		estimator = CharWidthEstimator(bold=True)
	text = " ".join((text or "").split())
	if not text:
		return FontFitResult(font_size=max(min_size, max_size), estimated_line_count=0, fits=True)

	sizes = candidate_sizes(min_size, max_size)
	for font_size in sizes[:-1]:
		if cannot_fit(text, box_width, box_height, font_size, estimator):
			continue
		lines, height = estimate_layout(text, box_width, font_size, estimator)
		if height <= box_height:
			return FontFitResult(
				font_size=font_size,
				estimated_line_count=len(lines),
				fits=True,
				lines=tuple(lines),
			)

	font_size = sizes[-1]
	lines, height = estimate_layout(text, box_width, font_size, estimator)
	return FontFitResult(
		font_size=font_size,
		estimated_line_count=len(lines),
		fits=height <= box_height,
		lines=tuple(lines),
	)
