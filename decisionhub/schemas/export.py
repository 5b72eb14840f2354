"""Schemas for case export."""

import uuid
from typing import Literal

from pydantic import BaseModel

ExportFormat = Literal["csv", "html"]


class ExportRequest(BaseModel):
    case_id: uuid.UUID
    format: ExportFormat = "csv"
