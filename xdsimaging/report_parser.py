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


"""Parser for retrieved CDA report payloads."""
import html
from typing import Optional

from xdsimaging.errors import MalformedReportError
from xdsimaging.model import Report, ReportDocument
from xdsimaging.registry.fragment import Fragment


class ReportPayloadParser:
    """Extracts the embedded PDF, the author and the title of a CDA report."""

    pdf_marker = "application/pdf"
    pdf_start = 'representation="B64">'
    pdf_end = "</text>"

    def parse(self, payload: bytes) -> Optional[Report]:
        """Parse a retrieved report payload.

        Parameters
        ----------
        payload: bytes
            Retrieved bytes, UTF-8 encoded.

        Returns
        ----------
        Optional[Report]
            The report, or None if the payload does not embed a PDF.
        """
        try:
            text = payload.decode("utf-8")
        except UnicodeDecodeError as exception:
            raise MalformedReportError("Report is not UTF-8 encoded.") from exception
        fragment = Fragment(text)
        if self.pdf_marker not in fragment:
            return None
        pdf = fragment.token(self.pdf_start, self.pdf_end, raw=True)
        if pdf is None:
            raise MalformedReportError("Could not find base64 encoded PDF.")
        return Report(
            author=self._author(fragment),
            title=self._required_text(fragment, "title", "Report has no title."),
            pdf=pdf,
        )

    def populate(
        self, document: ReportDocument, payload: bytes
    ) -> Optional[Report]:
        """Parse and store the report of a document, unless already stored."""
        if document.is_retrieved:
            return document.report
        document.report = self.parse(payload)
        return document.report

    def _author(self, fragment: Fragment) -> str:
        author = fragment.element("author")
        if author is None:
            raise MalformedReportError("Report has no author.")
        family = self._required_text(
            author.body, "family", "Report author has no family name."
        )
        given = self._required_text(
            author.body, "given", "Report author has no given name."
        )
        return f"{family} {given}"

    @staticmethod
    def _required_text(fragment: Fragment, name: str, message: str) -> str:
        element = fragment.element(name)
        if element is None:
            raise MalformedReportError(message)
        return html.unescape(element.body.text.strip())
