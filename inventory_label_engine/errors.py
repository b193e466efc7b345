"""
Error types raised by the label engine.
"""


class LabelEngineError(Exception):
	"""
	Base class for label engine errors.
	"""


class ValidationError(LabelEngineError, ValueError):
	"""
	An item or its metadata cannot produce any label.
	"""


class EncodingError(LabelEngineError, ValueError):
	"""
	A value cannot be encoded as a Code 39 symbol.
	"""


class ConfigurationError(LabelEngineError):
	"""
	A label format is unknown or internally inconsistent.
	"""
