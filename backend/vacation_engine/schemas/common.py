from __future__ import annotations

from datetime import date
from typing import Annotated

from pydantic import BeforeValidator

from vacation_engine.services.dates import parse_local_date

# Calendar date accepted as ISO (YYYY-MM-DD, time part ignored) or dd/mm/yyyy.
LocalDate = Annotated[date, BeforeValidator(parse_local_date)]
