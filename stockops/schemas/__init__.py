from .corrections import (
    StockCorrection,
    StockCountEntry,
    StepResult,
    CorrectionReport,
    StockCountResult,
    StockCountReport,
)
