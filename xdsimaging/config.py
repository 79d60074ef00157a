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

"""Module containing settings for xdsimaging."""


class Settings:
    """Class containing settings. Settings are to be accessed through the
    global variable settings.

    The identifiers are the ones used by the registry vendor when publishing
    imaging documents and are read by the parsers each time a response is
    parsed."""

    def __init__(self) -> None:
        self._accession_number_identifier = "urn:ihe:iti:xds:2013:accession"
        self._retrieve_url_identifier = "urn:ihe:iti:xds:2016:studyInstanceUID"
        self._event_code_scheme = "urn:uuid:2c6b8cb7-8b2a-4051-b291-b1ae6a575ef4"
        self._unique_id_scheme = "urn:uuid:2e82c1f6-a085-4c72-9da3-8640a32e42ab"
        self._modality_coding_scheme = "1.2.250.1.213.1.1.5.618"
        self._region_coding_scheme = "1.2.250.1.213.1.1.5.695"
        self._display_separator = " et "

    @property
    def accession_number_identifier(self) -> str:
        """Substring identifying the accession number entry in a reference id
        list."""
        return self._accession_number_identifier

    @accession_number_identifier.setter
    def accession_number_identifier(self, value: str) -> None:
        self._accession_number_identifier = value

    @property
    def retrieve_url_identifier(self) -> str:
        """Substring identifying the study retrieve entry in a reference id
        list."""
        return self._retrieve_url_identifier

    @retrieve_url_identifier.setter
    def retrieve_url_identifier(self, value: str) -> None:
        self._retrieve_url_identifier = value

    @property
    def event_code_scheme(self) -> str:
        """Classification scheme of the event code list holding modalities and
        regions."""
        return self._event_code_scheme

    @event_code_scheme.setter
    def event_code_scheme(self, value: str) -> None:
        self._event_code_scheme = value

    @property
    def unique_id_scheme(self) -> str:
        """Identification scheme of the document unique id external
        identifier."""
        return self._unique_id_scheme

    @unique_id_scheme.setter
    def unique_id_scheme(self, value: str) -> None:
        self._unique_id_scheme = value

    @property
    def modality_coding_scheme(self) -> str:
        """Coding scheme of event codes that are modalities."""
        return self._modality_coding_scheme

    @modality_coding_scheme.setter
    def modality_coding_scheme(self, value: str) -> None:
        self._modality_coding_scheme = value

    @property
    def region_coding_scheme(self) -> str:
        """Coding scheme of event codes that are anatomic regions."""
        return self._region_coding_scheme

    @region_coding_scheme.setter
    def region_coding_scheme(self, value: str) -> None:
        self._region_coding_scheme = value

    @property
    def display_separator(self) -> str:
        """Separator used when joining modalities or regions for display."""
        return self._display_separator

    @display_separator.setter
    def display_separator(self, value: str) -> None:
        self._display_separator = value


settings = Settings()
"""Global settings variable."""
