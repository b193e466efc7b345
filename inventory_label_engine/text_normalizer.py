"""
Free-text cleanup and truncation for label fields.
"""

# Standard Library
import dataclasses
import datetime
import re
import unicodedata

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config


ELLIPSIS = ile.config.ELLIPSIS
PRODUCT_NAME_PLACEHOLDER = ile.config.PRODUCT_NAME_PLACEHOLDER
WORD_BOUNDARY_RATIO = ile.config.WORD_BOUNDARY_RATIO
DATE_PATTERNS = ile.config.DATE_PATTERNS
DATE_MAX_LENGTH = ile.config.DATE_MAX_LENGTH
TWO_DIGIT_YEAR_PIVOT = ile.config.TWO_DIGIT_YEAR_PIVOT
BRAND_ABBREVIATIONS = ile.config.BRAND_ABBREVIATIONS
UNIT_ABBREVIATIONS = ile.config.UNIT_ABBREVIATIONS
LOCATION_ABBREVIATIONS = ile.config.LOCATION_ABBREVIATIONS
BRAND_MAX_LENGTH = ile.config.BRAND_MAX_LENGTH
STRAIN_MAX_LENGTH = ile.config.STRAIN_MAX_LENGTH
SIZE_MAX_LENGTH = ile.config.SIZE_MAX_LENGTH
LOCATION_MAX_LENGTH = ile.config.LOCATION_MAX_LENGTH

ASCII_REPLACEMENTS = {
	"\u2018": "'",
	"\u2019": "'",
	"\u201a": "'",
	"\u201b": "'",
	"\u2032": "'",
	"\u201c": '"',
	"\u201d": '"',
	"\u201e": '"',
	"\u201f": '"',
	"\u2033": '"',
	"\u2013": "-",
	"\u2014": "-",
	"\u2212": "-",
	"\u00d7": "x",
	"\u00f7": "/",
	"\u00d8": "O",
	"\u00f8": "o",
	"\u00bd": "1/2",
	"\u00bc": "1/4",
	"\u00be": "3/4",
	"\u00b0": "deg",
	"\u2122": "TM",
	"\u00ae": "R",
	"\u00a0": " ",
}
WHITESPACE_RUN = re.compile(r"\s+")
STRAIN_CLEANUP_PATTERNS = (
	re.compile(r"^strain\s*", re.IGNORECASE),
	re.compile(r"\s*strain$", re.IGNORECASE),
	re.compile(r"^cannabis\s*", re.IGNORECASE),
	re.compile(r"\s*cannabis$", re.IGNORECASE),
)


@dataclasses.dataclass(frozen=True)
class DateText:
	text: str
	recognized: bool
	warning: bool


#============================================
def fold_to_ascii(value: str) -> str:
	"""
	Fold text to ASCII for the standard PDF fonts.

	Symbols with a readable ASCII form are replaced first; accented
	letters lose their marks; anything else is dropped.

	Args:
		value: Input text.

	Returns:
		ASCII text.
	"""
	if not value:
		return value
	for old, new in ASCII_REPLACEMENTS.items():
		value = value.replace(old, new)
	value = unicodedata.normalize("NFKD", value)
	value = value.encode("ascii", "ignore").decode("ascii")
	return value


#============================================
def unprintable_characters(text: object) -> str:
	"""
	List the characters fold_to_ascii would drop from text.

	Args:
		text: Input value, any type.

	Returns:
		Dropped characters in first-seen order, empty when none.
	"""
	if text is None:
		return ""
	dropped: list[str] = []
	for char in str(text):
		if char.isspace() or unicodedata.combining(char):
			continue
		if fold_to_ascii(char) or char in dropped:
			continue
		dropped.append(char)
	return "".join(dropped)


#============================================
def clean_text(text: object, ascii_only: bool = True) -> str:
	"""
	Trim text, collapse whitespace runs and fold it to printable ASCII.

	Args:
		text: Input value, any type.
		ascii_only: Fold to ASCII; False keeps other characters so a
			caller can reject them.

	Returns:
		Cleaned string, empty for None.
	"""
	if text is None:
		return ""
	value = str(text)
	if ascii_only:
		value = fold_to_ascii(value)
	else:
		for old, new in ASCII_REPLACEMENTS.items():
			value = value.replace(old, new)
	value = WHITESPACE_RUN.sub(" ", value)
	return value.strip()


#============================================
def truncate(value: str, max_length: int) -> str:
	"""
	Truncate a cleaned string to max_length with an ellipsis marker.

	Cuts at the last word boundary when that keeps at least 80% of the
	allowed length, otherwise cuts hard at max_length - 3.

	Args:
		value: Cleaned string.
		max_length: Maximum result length.

	Returns:
		String no longer than max_length.
	"""
	if len(value) <= max_length:
		return value
	if max_length <= len(ELLIPSIS):
		return value[:max(0, max_length)]
	budget = max_length - len(ELLIPSIS)
	cut = value[:budget]
	last_space = cut.rfind(" ")
	if last_space >= max_length * WORD_BOUNDARY_RATIO:
		return cut[:last_space].rstrip() + ELLIPSIS
	return cut.rstrip() + ELLIPSIS


#============================================
def normalize(text: object, max_length: int, placeholder: str = PRODUCT_NAME_PLACEHOLDER) -> str:
	"""
	Normalize a free-text field to its canonical label form.

	Args:
		text: Input text, may be None.
		max_length: Maximum result length.
		placeholder: Returned for empty input.

	Returns:
		Normalized text, never longer than max_length unless the
		placeholder itself is longer.
	"""
	value = clean_text(text)
	if not value:
		return placeholder
	return truncate(value, max_length)


#============================================
def _expand_year(year: int, digits: int) -> int:
	if digits > 2:
		return year
	if year <= TWO_DIGIT_YEAR_PIVOT:
		return 2000 + year
	return 1900 + year


#============================================
def normalize_date(text: object) -> DateText:
	"""
	Normalize a date field to MM/DD/YY.

	Args:
		text: Date text in one of the accepted patterns.

	Returns:
		DateText; unrecognized input passes through with warning set.
	"""
	value = clean_text(text)
	if not value:
		return DateText(text="", recognized=False, warning=False)

	for pattern_name, pattern in DATE_PATTERNS:
		match = pattern.match(value)
		if match is None:
			continue
		if pattern_name == "YYYY-MM-DD":
			year_text, month_text, day_text = match.groups()
		else:
			month_text, day_text, year_text = match.groups()
		year = _expand_year(int(year_text), len(year_text))
		try:
			parsed = datetime.date(year, int(month_text), int(day_text))
		except ValueError:
			break
		return DateText(text=parsed.strftime("%m/%d/%y"), recognized=True, warning=False)

	return DateText(text=truncate(value, DATE_MAX_LENGTH), recognized=False, warning=True)


#============================================
def _apply_abbreviations(value: str, abbreviations: dict[str, str]) -> str:
	for full, short in abbreviations.items():
		value = re.sub(rf"\b{full}\b", short, value, flags=re.IGNORECASE)
	return value


#============================================
def format_brand(brand: object, max_length: int = BRAND_MAX_LENGTH) -> str:
	"""
	Abbreviate common company words in a brand name.

	Args:
		brand: Brand text.
		max_length: Maximum result length.

	Returns:
		Formatted brand, empty for missing input.
	"""
	value = clean_text(brand)
	if not value:
		return ""
	value = _apply_abbreviations(value, BRAND_ABBREVIATIONS)
	return truncate(value, max_length)


#============================================
def format_strain(strain: object, max_length: int = STRAIN_MAX_LENGTH) -> str:
	"""
	Strip redundant "strain" and "cannabis" words from a strain name.

	Args:
		strain: Strain text.
		max_length: Maximum result length.

	Returns:
		Formatted strain.
	"""
	value = clean_text(strain)
	for pattern in STRAIN_CLEANUP_PATTERNS:
		value = pattern.sub("", value)
	return truncate(value.strip(), max_length)


#============================================
def format_size(size: object, max_length: int = SIZE_MAX_LENGTH) -> str:
	"""
	Standardize unit words in a size field.

	Args:
		size: Size text like "3.5 GRAMS".
		max_length: Maximum result length.

	Returns:
		Formatted size, hard cut without ellipsis.
	"""
	value = clean_text(size)
	value = _apply_abbreviations(value, UNIT_ABBREVIATIONS)
	return value[:max_length]


#============================================
def format_location(location: object, max_length: int = LOCATION_MAX_LENGTH) -> str:
	"""
	Abbreviate warehouse location words.

	Args:
		location: Location text.
		max_length: Maximum result length.

	Returns:
		Formatted location, hard cut without ellipsis.
	"""
	value = clean_text(location)
	value = _apply_abbreviations(value, LOCATION_ABBREVIATIONS)
	return value[:max_length]


#============================================
def format_sku(sku: object, add_hyphens: bool = False) -> str:
	"""
	Upper-case a SKU, optionally hyphenated every 4 characters.

	Args:
		sku: SKU text.
		add_hyphens: Insert readability hyphens for SKUs longer than 6.

	Returns:
		Formatted SKU.
	"""
	value = clean_text(sku).upper()
	if add_hyphens and len(value) > 6:
		chunks = [value[index:index + 4] for index in range(0, len(value), 4)]
		value = "-".join(chunks)
	return value


#============================================
def format_quantity(quantity: object, unit: str = "") -> str:
	"""
	Format a numeric quantity for display.

	Args:
		quantity: Number or numeric string.
		unit: Optional unit suffix.

	Returns:
		Formatted quantity; non-numeric input is returned as text.
	"""
	if quantity is None or quantity == "":
		return ""
	try:
		number = float(quantity)
	except (TypeError, ValueError):
		return clean_text(quantity)
	if number.is_integer():
		formatted = str(int(number))
	elif abs(number) < 10:
		formatted = f"{number:.2f}".rstrip("0").rstrip(".")
	else:
		formatted = f"{number:.1f}".rstrip("0").rstrip(".")
	if unit:
		return f"{formatted} {unit}"
	return formatted
