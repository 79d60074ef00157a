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


import datetime
from pathlib import Path
from typing import Optional, Tuple

import click
from marshmallow import ValidationError
from pydicom.errors import InvalidDicomError

from xdsimaging.errors import XdsImagingError
from xdsimaging.json_schema import DocumentSetJsonSchema, SeriesJsonSchema
from xdsimaging.kos_parser import KosParser
from xdsimaging.linker import DocumentLinker
from xdsimaging.model import QueryFilter
from xdsimaging.query import build_query
from xdsimaging.registry import RegistryResponseParser
from xdsimaging.report_parser import ReportPayloadParser

DATE_FORMATS = ["%Y-%m-%d", "%Y%m%d"]


@click.group()
def main():
    """Inspect registry responses and retrieved imaging documents."""


@main.command()
@click.argument("response", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-p",
    "--patient-id",
    default="",
    help="Identifier of the queried patient, added to the patient info.",
)
def documents(response: Path, patient_id: str):
    """Print the linked documents of a stored query response as json."""
    try:
        document_set = RegistryResponseParser().parse(
            response.read_text(encoding="utf-8"), patient_id
        )
        DocumentLinker().link(document_set)
    except XdsImagingError as error:
        raise click.ClickException(str(error)) from error
    click.echo(DocumentSetJsonSchema().dumps(document_set, indent=2))


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--anatomic-location",
    default="",
    help="Anatomic location to set on the series.",
)
def kos(file: Path, anatomic_location: str):
    """Print the series referenced by a retrieved KOS document as json."""
    parser = KosParser()
    try:
        content = parser.parse(file.read_bytes())
    except (XdsImagingError, InvalidDicomError, ValidationError) as error:
        raise click.ClickException(str(error)) from error
    series = parser.series(content, anatomic_location)
    click.echo(SeriesJsonSchema(many=True).dumps(series, indent=2))


@main.command()
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--pdf",
    "pdf_path",
    type=click.Path(path_type=Path),
    help="Path to write the embedded PDF to.",
)
def report(file: Path, pdf_path: Optional[Path]):
    """Print author and title of a retrieved CDA report."""
    try:
        parsed = ReportPayloadParser().parse(file.read_bytes())
    except XdsImagingError as error:
        raise click.ClickException(str(error)) from error
    if parsed is None:
        raise click.ClickException(f"{file} does not embed a PDF.")
    click.echo(f"Author: {parsed.author}")
    click.echo(f"Title: {parsed.title}")
    if pdf_path is not None:
        pdf_path.write_bytes(parsed.decode_pdf())


@main.command()
@click.option(
    "-m",
    "--modality",
    "modalities",
    multiple=True,
    help="Modality to search for. Can be specified multiple times.",
)
@click.option(
    "-r",
    "--region",
    "regions",
    multiple=True,
    help="Anatomic region to search for. Can be specified multiple times.",
)
@click.option("--start", type=click.DateTime(DATE_FORMATS), help="First date.")
@click.option("--stop", type=click.DateTime(DATE_FORMATS), help="Last date.")
@click.option("-a", "--accession-number", help="Accession number of the exam.")
def query(
    modalities: Tuple[str, ...],
    regions: Tuple[str, ...],
    start: Optional[datetime.datetime],
    stop: Optional[datetime.datetime],
    accession_number: Optional[str],
):
    """Print the registry query string for the given filters."""
    query_filter = QueryFilter(
        modalities=modalities,
        regions=regions,
        start=start.date() if start is not None else None,
        stop=stop.date() if stop is not None else None,
        accession_number=accession_number,
    )
    click.echo(build_query(query_filter))


if __name__ == "__main__":
    main()
