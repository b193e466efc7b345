"""
Input records and render plan types.
"""

# Standard Library
import dataclasses
import re

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.barcode_codec
import inventory_label_engine.brand_splitter


BarcodeSymbol = ile.barcode_codec.BarcodeSymbol
BrandInfo = ile.brand_splitter.BrandInfo

WHOLE_NUMBER = re.compile(r"^\s*[-+]?\d+\s*$")


#============================================
def _pick(data: dict, *keys: str, default=None):
	for key in keys:
		if key in data and data[key] is not None:
			return data[key]
	return default


#============================================
def _optional_int(value):
	"""
	Convert a quantity field to int when it holds a whole number.

	Anything else is returned unchanged so assembly rejects that item
	alone instead of the whole batch.
	"""
	if value is None or value == "":
		return None
	if isinstance(value, bool):
		return value
	if isinstance(value, int):
		return value
	if isinstance(value, float) and value.is_integer():
		return int(value)
	if isinstance(value, str) and WHOLE_NUMBER.match(value):
		return int(value)
	return value


@dataclasses.dataclass(frozen=True)
class SourceItem:
	sku: str = ""
	barcode: str = ""
	product_name: str = ""
	brand: str | None = None
	source: str = ""
	size: str = ""
	strain: str = ""
	location: str = ""

	@classmethod
	def from_dict(cls, data: dict) -> "SourceItem":
		"""
		Build a SourceItem from camelCase or snake_case keys.

		Args:
			data: Record dict.

		Returns:
			SourceItem.
		"""
		brand = _pick(data, "brand")
		return cls(
			sku=str(_pick(data, "sku", default="")),
			barcode=str(_pick(data, "barcode", default="")),
			product_name=str(_pick(data, "product_name", "productName", default="")),
			brand=None if brand is None else str(brand),
			source=str(_pick(data, "source", "displaySource", default="")),
			size=str(_pick(data, "size", default="")),
			strain=str(_pick(data, "strain", default="")),
			location=str(_pick(data, "location", "shipToLocation", default="")),
		)


@dataclasses.dataclass(frozen=True)
class EnhancedData:
	label_quantity: int = 1
	case_quantity: int | None = None
	box_count: int | None = None
	harvest_date: str | None = None
	packaged_date: str | None = None

	@classmethod
	def from_dict(cls, data: dict) -> "EnhancedData":
		"""
		Build EnhancedData from camelCase or snake_case keys.

		Args:
			data: Metadata dict.

		Returns:
			EnhancedData.

		"""
		label_quantity = _optional_int(_pick(data, "label_quantity", "labelQuantity"))
		return cls(
			label_quantity=1 if label_quantity is None else label_quantity,
			case_quantity=_optional_int(_pick(data, "case_quantity", "caseQuantity")),
			box_count=_optional_int(_pick(data, "box_count", "boxCount")),
			harvest_date=_pick(data, "harvest_date", "harvestDate"),
			packaged_date=_pick(data, "packaged_date", "packagedDate"),
		)


@dataclasses.dataclass(frozen=True)
class SheetPosition:
	page_index: int
	slot_index: int
	x: float
	y: float
	width: float
	height: float
	rotation_degrees: int


@dataclasses.dataclass(frozen=True)
class FontSizes:
	product: float
	brand: float | None = None


@dataclasses.dataclass(frozen=True)
class LabelContent:
	product_name: str
	product_lines: tuple[str, ...]
	brand: str
	brand_lines: tuple[str, ...]
	sku: str
	source: str
	size: str
	strain: str
	location: str
	harvest_date: str
	packaged_date: str
	case_quantity: str


@dataclasses.dataclass(frozen=True)
class RenderPlan:
	item: SourceItem
	brand_info: BrandInfo
	font_sizes: FontSizes
	barcode: BarcodeSymbol
	audit_string: str
	position: SheetPosition | None
	copy_index: int
	box_number: int
	total_boxes: int
	label_quantity: int
	spec_name: str
	content: LabelContent
	warnings: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ItemFailure:
	index: int
	sku: str
	message: str
