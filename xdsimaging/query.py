#    Copyright 2023 SECTRA AB
#
#    Licensed under the Apache License, Version 2.0 (the "License");
#    you may not use this file except in compliance with the License.
#    You may obtain a copy of the License at
#
#        http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS,
#    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#    See the License for the specific language governing permissions and
#    limitations under the License.


"""Query strings sent along registry searches and PACS imports."""
import datetime
from collections.abc import Set
from typing import Collection, List, Optional, Tuple
from urllib.parse import quote, urlencode

from xdsimaging.errors import DateFormatError
from xdsimaging.model import QueryFilter

QUERY_DATE_FORMAT = "%Y%m%d0000"
FILTER_DATE_FORMAT = "%Y%m%d"


def _ordered_values(values: Collection[str]) -> List[str]:
    if isinstance(values, Set):
        return sorted(values)
    return list(dict.fromkeys(values))


def _format_date(date: datetime.date) -> str:
    return date.strftime(QUERY_DATE_FORMAT)


def build_query(query_filter: QueryFilter) -> str:
    """Return the query string of a filter, e.g.
    `modality=CT&modality=MR&start=202301010000`. Keys are given in the order
    modality, region, start, stop, accessionNumber and absent criteria are
    left out."""
    parameters: List[Tuple[str, str]] = []
    parameters.extend(
        ("modality", modality)
        for modality in _ordered_values(query_filter.modalities)
    )
    parameters.extend(
        ("region", region) for region in _ordered_values(query_filter.regions)
    )
    if query_filter.start is not None:
        parameters.append(("start", _format_date(query_filter.start)))
    if query_filter.stop is not None:
        parameters.append(("stop", _format_date(query_filter.stop)))
    if query_filter.accession_number:
        parameters.append(("accessionNumber", query_filter.accession_number))
    return urlencode(parameters, quote_via=quote)


def _parse_filter_date(value: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(value[:8], FILTER_DATE_FORMAT).date()
    except ValueError as exception:
        raise DateFormatError(
            f"Filter date {value!r} is not a valid date."
        ) from exception


def parse_filter_parameters(text: str) -> QueryFilter:
    """Parse launch parameters given by a RIS, e.g.
    `modality=CT/anatomicRegion=Thorax/studyDate=20210123-20230123/`.

    A study date range without a dash is a start date only."""
    parameters = {}
    for parameter in text.split("/"):
        key, separator, value = parameter.partition("=")
        if separator != "" and value != "":
            parameters.setdefault(key.strip(), value.strip())
    start: Optional[datetime.date] = None
    stop: Optional[datetime.date] = None
    study_date = parameters.get("studyDate")
    if study_date is not None:
        first, separator, last = study_date.partition("-")
        start = _parse_filter_date(first)
        if separator != "" and last != "":
            stop = _parse_filter_date(last)
    return QueryFilter(
        modalities=_single(parameters.get("modality")),
        regions=_single(parameters.get("anatomicRegion")),
        start=start,
        stop=stop,
        accession_number=parameters.get("accessionNumber"),
    )


def _single(value: Optional[str]) -> Tuple[str, ...]:
    if value is None:
        return ()
    return (value,)


def build_import_query(study_uid: str, series_uid: Optional[str] = None) -> str:
    """Return the query string asking for a study, or a single series of it, to
    be stored in the local PACS."""
    parameters = [("studyUID", study_uid)]
    if series_uid is not None:
        parameters.append(("serieUID", series_uid))
    return urlencode(parameters, quote_via=quote)
