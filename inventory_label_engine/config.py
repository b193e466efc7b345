"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import re


POINTS_PER_INCH = 72.0
PRINTER_MARGIN = 12.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_FONT_MONO_BOLD = "Courier-Bold"

BOLD_CHAR_WIDTH_FACTOR = 0.62
REGULAR_CHAR_WIDTH_FACTOR = 0.55
LINE_HEIGHT_FACTOR = 1.15
FONT_STEP = 1.0
METRICS_SAMPLE_TEXT = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 "

ELLIPSIS = "..."
PRODUCT_NAME_PLACEHOLDER = "Product Name"
WORD_BOUNDARY_RATIO = 0.8
DATE_PLACEHOLDER = "MM/DD/YY"
UNKNOWN_USER = "Unknown"

TWO_DIGIT_YEAR_PIVOT = 50
DATE_PATTERNS = (
	("MM/DD/YYYY", re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")),
	("MM/DD/YY", re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2})$")),
	("MM-DD-YYYY", re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{4})$")),
	("MM-DD-YY", re.compile(r"^(\d{1,2})-(\d{1,2})-(\d{2})$")),
	("YYYY-MM-DD", re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")),
)
DATE_MAX_LENGTH = 20

LABEL_QUANTITY_MIN = 1
CASE_QUANTITY_MIN = 1
BOX_COUNT_MIN = 1

CODE39_ALPHABET = frozenset("0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ -.$/+%")
CODE39_MAX_LENGTH = 43
FALLBACK_PREFIX_LENGTH = 10
FALLBACK_DEFAULT_PREFIX = "ITEM"

BRAND_CANDIDATE_MAX_CHARS = 30
BRAND_CANDIDATE_MAX_WORDS = 4
EMBEDDED_BRAND_MAX_PREFIX = 10

DEFAULT_BRANDS = (
	"Curaleaf",
	"Grassroots",
	"Reef",
	"B-Noble",
	"Cresco",
	"Rythm",
	"GTI",
	"Verano",
	"Aeriz",
	"Revolution",
	"Cookies",
	"Jeeter",
	"Raw Garden",
	"Stiiizy",
	"Select",
	"Heavy Hitters",
	"Papa & Barkley",
	"Kiva",
	"Wyld",
	"Wana",
	"Plus Products",
	"Legion of Bloom",
	"AbsoluteXtracts",
	"Matter",
	"Pharmacann",
	"Green Thumb",
	"Columbia Care",
	"Trulieve",
	"FIND",
)

BRAND_ABBREVIATIONS = {
	"INCORPORATED": "INC",
	"CORPORATION": "CORP",
	"COMPANY": "CO",
	"LIMITED": "LTD",
	"CANNABIS": "CANN",
	"CULTIVATION": "CULT",
}
UNIT_ABBREVIATIONS = {
	"GRAMS": "g",
	"GRAM": "g",
	"OUNCES": "oz",
	"OUNCE": "oz",
	"POUNDS": "lb",
	"POUND": "lb",
	"MILLIGRAMS": "mg",
	"MILLIGRAM": "mg",
	"KILOGRAMS": "kg",
	"KILOGRAM": "kg",
}
LOCATION_ABBREVIATIONS = {
	"WAREHOUSE": "WH",
	"SECTION": "SEC",
	"AISLE": "A",
	"SHELF": "SH",
	"BIN": "B",
	"LEVEL": "L",
}
BRAND_MAX_LENGTH = 30
STRAIN_MAX_LENGTH = 24
SIZE_MAX_LENGTH = 15
LOCATION_MAX_LENGTH = 15
SOURCE_MAX_LENGTH = 12
DEFAULT_SOURCE = "MAIN"

PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10
BORDER_LINE_WIDTH = 1.0
OUTLINE_LINE_WIDTH = 0.3
WRITING_BOX_LINE_COUNT = 3
BARCODE_QUIET_FRACTION = 0.05


@dataclasses.dataclass
class RenderConfig:
	draw_outlines: bool
	calibration: bool
	draw_borders: bool
	verbose: bool


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH
