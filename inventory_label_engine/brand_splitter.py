"""
Heuristic separation of a brand name from a product name.
"""

# Standard Library
import dataclasses
import enum
import re
from collections.abc import Sequence

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.config
import inventory_label_engine.text_normalizer


clean_text = ile.text_normalizer.clean_text

PRODUCT_NAME_PLACEHOLDER = ile.config.PRODUCT_NAME_PLACEHOLDER
BRAND_CANDIDATE_MAX_CHARS = ile.config.BRAND_CANDIDATE_MAX_CHARS
BRAND_CANDIDATE_MAX_WORDS = ile.config.BRAND_CANDIDATE_MAX_WORDS
EMBEDDED_BRAND_MAX_PREFIX = ile.config.EMBEDDED_BRAND_MAX_PREFIX

# priority order matters: first shape that yields an acceptable candidate wins
SEPARATOR_PATTERNS = (
	re.compile(r"^(?P<candidate>.+?)\s+[-\u2013\u2014]\s+(?P<rest>.+)$"),
	re.compile(r"^(?P<candidate>.+?):\s+(?P<rest>.+)$"),
	re.compile(r"^(?P<candidate>.+?)\s*\|\s*(?P<rest>.+)$"),
	re.compile(r"^(?P<candidate>.+?)\s+by\s+(?P<rest>.+)$", re.IGNORECASE),
)
MEASUREMENT_PATTERN = re.compile(
	r"\d+(?:\.\d+)?\s*(?:mg|g|gram|grams|ml|oz|lb|kg|ct|pk|pack|count)\b",
	re.IGNORECASE,
)
PRODUCT_TYPE_PATTERN = re.compile(
	r"\b(?:capsules?|gumm(?:y|ies)|flower|concentrates?|strains?)\b",
	re.IGNORECASE,
)
LETTER_PATTERN = re.compile(r"[A-Za-z]")
EDGE_PUNCTUATION = " -:|,"


class BrandMethod(enum.Enum):
	EXACT_MATCH = "ExactMatch"
	PATTERN_MATCH = "PatternMatch"
	EMBEDDED = "Embedded"
	NONE = "None"


class BrandConfidence(enum.Enum):
	HIGH = "High"
	MEDIUM = "Medium"
	LOW = "Low"
	NONE = "None"


@dataclasses.dataclass(frozen=True)
class BrandInfo:
	brand: str
	remainder_product_name: str
	detected: bool
	method: BrandMethod
	confidence: BrandConfidence


#============================================
def _no_brand(text: str) -> BrandInfo:
	return BrandInfo(
		brand="",
		remainder_product_name=text,
		detected=False,
		method=BrandMethod.NONE,
		confidence=BrandConfidence.NONE,
	)


#============================================
def is_brand_candidate(candidate: str) -> bool:
	"""
	Check whether text before a separator can plausibly be a brand.

	Args:
		candidate: Candidate brand text.

	Returns:
		True when the candidate is short and is not a measurement or a
		product-type word.
	"""
	candidate = candidate.strip()
	if not candidate or len(candidate) > BRAND_CANDIDATE_MAX_CHARS:
		return False
	if len(candidate.split()) > BRAND_CANDIDATE_MAX_WORDS:
		return False
	if LETTER_PATTERN.search(candidate) is None:
		return False
	if MEASUREMENT_PATTERN.search(candidate) is not None:
		return False
	if PRODUCT_TYPE_PATTERN.search(candidate) is not None:
		return False
	return True


#============================================
def match_exact_prefix(text: str, brand_dictionary: Sequence[str]) -> BrandInfo | None:
	"""
	Match a dictionary brand at the start of the text.

	Args:
		text: Cleaned product name.
		brand_dictionary: Ordered brand names.

	Returns:
		BrandInfo or None.
	"""
	lowered = text.lower()
	for entry in brand_dictionary:
		brand = clean_text(entry)
		if not brand:
			continue
		size = len(brand)
		if len(text) <= size or not lowered.startswith(brand.lower()):
			continue
		if not text[size].isspace():
			continue
		remainder = text[size:].strip()
		if not remainder:
			continue
		return BrandInfo(
			brand=brand,
			remainder_product_name=remainder,
			detected=True,
			method=BrandMethod.EXACT_MATCH,
			confidence=BrandConfidence.HIGH,
		)
	return None


#============================================
def match_separator_pattern(text: str) -> BrandInfo | None:
	"""
	Match brand-like text ahead of a separator such as " - " or ": ".

	Args:
		text: Cleaned product name.

	Returns:
		BrandInfo or None.
	"""
	for pattern in SEPARATOR_PATTERNS:
		match = pattern.match(text)
		if match is None:
			continue
		candidate = match.group("candidate").strip()
		rest = match.group("rest").strip()
		if not rest or not is_brand_candidate(candidate):
			continue
		return BrandInfo(
			brand=candidate,
			remainder_product_name=rest,
			detected=True,
			method=BrandMethod.PATTERN_MATCH,
			confidence=BrandConfidence.MEDIUM,
		)
	return None


#============================================
def match_embedded(text: str, brand_dictionary: Sequence[str]) -> BrandInfo | None:
	"""
	Match a dictionary brand appearing as a whole word near the start.

	Args:
		text: Cleaned product name.
		brand_dictionary: Ordered brand names.

	Returns:
		BrandInfo or None.
	"""
	for entry in brand_dictionary:
		brand = clean_text(entry)
		if not brand:
			continue
		pattern = re.compile(rf"(?<!\w){re.escape(brand)}(?!\w)", re.IGNORECASE)
		match = pattern.search(text)
		if match is None:
			continue
		before = text[:match.start()].strip(EDGE_PUNCTUATION)
		if len(before) > EMBEDDED_BRAND_MAX_PREFIX:
			continue
		after = text[match.end():].strip(EDGE_PUNCTUATION)
		remainder = clean_text(f"{before} {after}")
		if not remainder:
			continue
		return BrandInfo(
			brand=brand,
			remainder_product_name=remainder,
			detected=True,
			method=BrandMethod.EMBEDDED,
			confidence=BrandConfidence.LOW,
		)
	return None


#============================================
def split(product_name: object, brand_dictionary: Sequence[str]) -> BrandInfo:
	"""
	Separate a brand from a product name.

	Strategies run in priority order and the first match wins: exact
	dictionary prefix, separator shape, embedded dictionary word.

	Args:
		product_name: Product name as recorded.
		brand_dictionary: Ordered brand names, read only.

	Returns:
		BrandInfo; the remainder is the full text when no brand is found.
	"""
	text = clean_text(product_name)
	if not text:
		return _no_brand(PRODUCT_NAME_PLACEHOLDER)

	result = match_exact_prefix(text, brand_dictionary)
	if result is None:
		result = match_separator_pattern(text)
	if result is None:
		result = match_embedded(text, brand_dictionary)
	if result is None:
		result = _no_brand(text)
	return result
