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


"""Query filter model."""
import datetime
from dataclasses import dataclass
from typing import Collection, Optional


@dataclass
class QueryFilter:
    """
    Filters chosen by the user for a registry query. Start and stop dates are
    inclusive and only the date part is used.
    """

    modalities: Collection[str] = ()
    regions: Collection[str] = ()
    start: Optional[datetime.date] = None
    stop: Optional[datetime.date] = None
    accession_number: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        """True if no filter is selected and the unfiltered query should be
        used."""
        return (
            len(self.modalities) == 0
            and len(self.regions) == 0
            and self.start is None
            and self.stop is None
            and not self.accession_number
        )
