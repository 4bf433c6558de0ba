# sheetsight/errors.py


class SheetSightError(Exception):
    """Base error. ``user_message`` is what the UI shows."""

    def __init__(self, user_message: str, detail: str = None):
        super().__init__(user_message)
        self.user_message = user_message
        self.detail = detail


class UnsupportedFormat(SheetSightError):
    def __init__(self, file_name: str):
        super().__init__("Invalid file type. Please upload a CSV or Excel file.",
                         detail=file_name)


class ParseError(SheetSightError):
    def __init__(self, message: str):
        super().__init__(f"Error parsing file: {message}", detail=message)


class EmptyDataset(SheetSightError):
    def __init__(self, file_name: str = None):
        super().__init__("The file is empty or contains no data in any of its sheets.",
                         detail=file_name)


class AnalysisRequestFailed(SheetSightError):
    def __init__(self, detail: str = None):
        super().__init__("Failed to get analysis from the model. Please try again later.",
                         detail=detail)


class InvalidCredential(AnalysisRequestFailed):
    def __init__(self, detail: str = None):
        SheetSightError.__init__(
            self,
            "The model API key is invalid. Please check your configuration.",
            detail=detail,
        )


class NoDataToAnalyze(SheetSightError):
    def __init__(self):
        super().__init__("No data available to analyze.")
