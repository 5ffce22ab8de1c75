import math
from typing import List, Optional
from pydantic import BaseModel, field_validator

# Input schema for POST /calculators/{handle}/values
class ValuesIn(BaseModel):
    values: List[float]  # Samples to append, in order

    @field_validator('values')
    def check_values_min_length(cls, v):
        # Ensure at least one value is provided
        if len(v) < 1:
            raise ValueError('values must have at least 1 item')
        return v

    model_config = {"extra": "forbid"}  # Forbid extra fields in input

# Input schema for read-file / write-stats: path relative to the data directory
class PathIn(BaseModel):
    path: str

    @field_validator('path')
    def check_path_not_blank(cls, v):
        if not v.strip():
            raise ValueError('path must not be empty')
        return v

    model_config = {"extra": "forbid"}

# Output schema for POST /calculators
class HandleOut(BaseModel):
    handle: int

# Output schema for GET /calculators
class HandleList(BaseModel):
    handles: List[int]  # Live handles, ascending

# Output schema for mutating calculator operations
class CalculatorState(BaseModel):
    handle: int
    live: bool   # False if the handle is unknown (operation was a no-op)
    count: int   # Samples stored after the operation

# Output schema for GET /calculators/{handle}/stats
class StatsOut(BaseModel):
    handle: int
    count: int                # Number of samples
    sum: Optional[float]      # Sum of samples
    mean: Optional[float]     # Arithmetic mean (0.0 when undefined)
    stddev: Optional[float]   # Sample standard deviation (0.0 for fewer than 2 samples)

    @field_validator('sum', 'mean', 'stddev')
    def non_finite_as_null(cls, v):
        # JSON has no inf/nan; overflowed statistics are reported as null
        if v is not None and not math.isfinite(v):
            return None
        return v
