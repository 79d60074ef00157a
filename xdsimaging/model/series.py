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


"""Series model."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Series:
    """
    Imaging series referenced by a KOS document.

    The retrieve url is the series level url of the series in the source PACS,
    ending with `studies/<study uid>/series/<series uid>`.
    """

    description: str = ""
    modality: str = ""
    image_count: int = 0
    anatomic_location: str = ""
    retrieve_url: str = ""
    series_instance_uid: Optional[str] = None

    @property
    def study_uid(self) -> Optional[str]:
        """Study instance uid parsed from the retrieve url."""
        return self._url_segment_after("studies")

    @property
    def series_uid(self) -> Optional[str]:
        """Series instance uid parsed from the retrieve url, or the referenced
        series instance uid if the url has no series segment."""
        series_uid = self._url_segment_after("series")
        if series_uid is not None:
            return series_uid
        return self.series_instance_uid

    def _url_segment_after(self, name: str) -> Optional[str]:
        segments = self.retrieve_url.split("/")
        try:
            index = segments.index(name)
        except ValueError:
            return None
        if index + 1 >= len(segments) or segments[index + 1] == "":
            return None
        return segments[index + 1]
