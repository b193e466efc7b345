"""
Place assembled labels into sheet slots across pages.
"""

# Standard Library
import dataclasses
import datetime
from collections.abc import Iterable, Sequence

# local repo modules
import inventory_label_engine as ile
import inventory_label_engine.assembler
import inventory_label_engine.config
import inventory_label_engine.errors
import inventory_label_engine.font_fitter
import inventory_label_engine.label_specs
import inventory_label_engine.models
import inventory_label_engine.sheet_geometry


LabelSpec = ile.label_specs.LabelSpec
SourceItem = ile.models.SourceItem
EnhancedData = ile.models.EnhancedData
RenderPlan = ile.models.RenderPlan
SheetPosition = ile.models.SheetPosition
ItemFailure = ile.models.ItemFailure
CharWidthEstimator = ile.font_fitter.CharWidthEstimator
ValidationError = ile.errors.ValidationError

DEFAULT_BRANDS = ile.config.DEFAULT_BRANDS
PROGRESS_UPDATE_EVERY = ile.config.PROGRESS_UPDATE_EVERY


@dataclasses.dataclass(frozen=True)
class PaginationResult:
	plans: list[RenderPlan]
	failures: list[ItemFailure]
	pages: int
	labels_per_sheet: int

	@property
	def total_labels(self) -> int:
		return len(self.plans)

	@property
	def empty_slots(self) -> int:
		return self.pages * self.labels_per_sheet - len(self.plans)


#============================================
def sheet_position(label_number: int, spec: LabelSpec) -> SheetPosition:
	"""
	Compute the sheet position of the n-th label in a batch.

	Args:
		label_number: 0-based global label number.
		spec: Label spec.

	Returns:
		SheetPosition with page, slot and cell rectangle.
	"""
	page_index, slot_index = divmod(label_number, spec.labels_per_sheet)
	cell = ile.sheet_geometry.position_for(slot_index, spec)
	return SheetPosition(
		page_index=page_index,
		slot_index=slot_index,
		x=cell.x,
		y=cell.y,
		width=cell.width,
		height=cell.height,
		rotation_degrees=spec.content_rotation_degrees,
	)


#============================================
def page_count(label_total: int, labels_per_sheet: int) -> int:
	"""
	Count the sheets needed for a number of labels.

	Args:
		label_total: Number of labels.
		labels_per_sheet: Slots per sheet.

	Returns:
		Number of sheets, 0 for no labels.
	"""
	if label_total <= 0:
		return 0
	return (label_total + labels_per_sheet - 1) // labels_per_sheet


#============================================
def paginate(
	entries: Iterable[tuple[SourceItem, EnhancedData]],
	spec: LabelSpec,
	audit_user: str | None,
	brand_dictionary: Sequence[str] = DEFAULT_BRANDS,
	now: datetime.datetime | None = None,
	allow_fallback: bool = True,
	estimator: CharWidthEstimator | None = None,
	verbose: bool = False,
) -> PaginationResult:
	"""
	Assemble every entry and assign sheet positions in batch order.

	Items that fail validation are recorded and skipped; the remaining
	labels fill slots without gaps.

	Args:
		entries: Ordered (SourceItem, EnhancedData) pairs.
		spec: Label spec.
		audit_user: Acting username.
		brand_dictionary: Ordered brand names.
		now: Batch timestamp shared by every label.
		allow_fallback: Whether synthetic barcodes may be generated.
		estimator: Text measurement strategy.
		verbose: Print per-item progress.

	Returns:
		PaginationResult.
	"""
	if now is None:
		now = datetime.datetime.now()
	plans: list[RenderPlan] = []
	failures: list[ItemFailure] = []
	for index, (item, enhanced_data) in enumerate(entries):
		try:
			item_plans = ile.assembler.assemble(
				item,
				enhanced_data,
				spec,
				audit_user,
				brand_dictionary=brand_dictionary,
				now=now,
				allow_fallback=allow_fallback,
				estimator=estimator,
			)
		except ValidationError as error:
			failures.append(ItemFailure(index=index, sku=item.sku, message=str(error)))
			if verbose:
				print(f"Skipped item {index} ({item.sku or 'no SKU'}): {error}")
			continue
		for plan in item_plans:
			position = sheet_position(len(plans), spec)
			plans.append(dataclasses.replace(plan, position=position))
		if verbose and (index + 1) % PROGRESS_UPDATE_EVERY == 0:
			print(f"Assembled {index + 1} items, {len(plans)} labels")
	return PaginationResult(
		plans=plans,
		failures=failures,
		pages=page_count(len(plans), spec.labels_per_sheet),
		labels_per_sheet=spec.labels_per_sheet,
	)


#============================================
def generate_labels(
	entries: Iterable[tuple[SourceItem, EnhancedData]],
	spec_name: str,
	audit_user: str | None,
	brand_dictionary: Sequence[str] = DEFAULT_BRANDS,
	now: datetime.datetime | None = None,
	allow_fallback: bool = True,
	estimator: CharWidthEstimator | None = None,
	verbose: bool = False,
) -> PaginationResult:
	"""
	Resolve a label format by name and paginate a batch onto it.

	Args:
		entries: Ordered (SourceItem, EnhancedData) pairs.
		spec_name: Label format name.
		audit_user: Acting username.
		brand_dictionary: Ordered brand names.
		now: Batch timestamp.
		allow_fallback: Whether synthetic barcodes may be generated.
		estimator: Text measurement strategy.
		verbose: Print per-item progress.

	Returns:
		PaginationResult.

	Raises:
		ConfigurationError: When the format name is unknown.
	"""
	spec = ile.label_specs.get_label_spec(spec_name)
	return paginate(
		entries,
		spec,
		audit_user,
		brand_dictionary=brand_dictionary,
		now=now,
		allow_fallback=allow_fallback,
		estimator=estimator,
		verbose=verbose,
	)
