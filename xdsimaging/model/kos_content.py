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


"""Models for the content of a Key Object Selection document."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ReferencedSeries:
    """Item of the referenced series sequence of a KOS document."""

    series_instance_uid: str
    image_count: Optional[int] = None
    retrieve_url: Optional[str] = None


@dataclass
class KosContent:
    """
    Attributes read from a KOS dataset.

    `text_value` is the structured report text listing, one line per series,
    the modality and description of the referenced series.
    """

    sop_instance_uid: str
    study_description: Optional[str] = None
    text_value: Optional[str] = None
    referenced_series: List[ReferencedSeries] = field(default_factory=list)
