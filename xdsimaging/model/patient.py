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


"""Patient model."""
import datetime
from dataclasses import dataclass
from enum import Enum


class PatientSex(Enum):
    F = "female"
    M = "male"
    O = "other"
    U = "unknown"
    A = "ambiguous"


@dataclass
class PatientInfo:
    """
    Patient demographics taken from the source patient info of the first
    document in a registry response. `ins` is the national patient identifier
    that was queried.
    """

    last_name: str
    first_name: str
    sex: PatientSex
    birth_date: datetime.date
    ins: str = ""

    @property
    def display_birth_date(self) -> str:
        return self.birth_date.strftime("%d/%m/%Y")
