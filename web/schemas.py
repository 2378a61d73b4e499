"""Pydantic schemas for API response bodies.

Domain results (ScanResult, MultipleScanResult) live in decoding.types.
These schemas define the exact wire format returned by each endpoint.
"""

from typing import Literal, Union

from pydantic import BaseModel

from decoding import MultipleScanResult, ScanOutcome


class ScanResultOut(BaseModel):
    """A single decoded code."""
    symbolType: Literal["Barcode", "QRCode"]
    data: str


class MultipleScanResultOut(BaseModel):
    """Several codes found in one decoder pass, in output order."""
    symbolType: Literal["Multiple"] = "Multiple"
    codes: list[ScanResultOut]


ScanResponse = Union[ScanResultOut, MultipleScanResultOut]


class ErrorOut(BaseModel):
    """Body of every 4xx/5xx JSON response."""
    error: str
    details: str | None = None


class HealthOut(BaseModel):
    status: str


def to_response(result: ScanOutcome) -> ScanResponse:
    """Convert a domain result into its response schema."""
    if isinstance(result, MultipleScanResult):
        return MultipleScanResultOut(
            codes=[ScanResultOut(**code.to_dict()) for code in result.results]
        )
    return ScanResultOut(**result.to_dict())
