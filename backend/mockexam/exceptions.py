class ExamServiceError(Exception):
	"""Base class for errors raised by the exam pipeline."""


class ModelOutputError(ExamServiceError):
	"""The model's text could not be parsed or did not match the expected shape."""


class ExamGenerationError(ExamServiceError):
	def __init__(self, message: str = "Failed to generate exam") -> None:
		super().__init__(message)


class MarkingError(ExamServiceError):
	def __init__(self, message: str = "Failed to mark exam") -> None:
		super().__init__(message)


class StudyToolError(ExamServiceError):
	pass
