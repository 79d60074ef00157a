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

"""Errors raised when parsing registry responses and retrieved documents."""


class XdsImagingError(Exception):
    """Base class for errors raised by xdsimaging."""


class MalformedResponseError(XdsImagingError):
    """Raised when a registry response does not follow the expected format."""


class MissingPatientInfoError(MalformedResponseError):
    """Raised when a required patient attribute is missing from a response."""


class NotADicomStreamError(XdsImagingError):
    """Raised when a retrieved payload does not contain a DICOM stream."""


class MalformedReportError(XdsImagingError):
    """Raised when a retrieved report payload lacks required content."""


class DateFormatError(XdsImagingError):
    """Raised when a document timestamp can not be normalized."""


class TransportError(XdsImagingError):
    """Raised by transport collaborators when a fetch fails."""
