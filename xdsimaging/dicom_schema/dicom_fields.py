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


from typing import Any, Generic, Optional, Sequence, TypeVar

from marshmallow import ValidationError, fields
from marshmallow.fields import Field
from pydicom import Dataset
from pydicom.uid import UID

ValueType = TypeVar("ValueType")


class UidDicomField(fields.Field):
    def _deserialize(self, value: Any, attr, data, **kwargs) -> UID:
        try:
            return UID(value)
        except (TypeError, ValueError) as error:
            raise ValidationError("Could not deserialize UID.") from error


class SequenceItemCountField(fields.Integer):
    """Loads a sequence as its number of items."""

    def _deserialize(
        self, value: Sequence[Dataset], attr: Optional[str], data, **kwargs
    ) -> int:
        try:
            return len(value)
        except TypeError as error:
            raise ValidationError("Could not count sequence items.") from error


class SequenceWrappingField(fields.Field, Generic[ValueType]):
    """Loads the nested field from the first item of a sequence."""

    def __init__(self, nested: Field, **kwargs):
        self._nested = nested
        super().__init__(**kwargs)

    def _deserialize(self, value: Sequence[Dataset], attr, data, **kwargs):
        if self._nested.data_key is not None:
            key = self._nested.data_key
        else:
            key = self._nested.name
        try:
            nested_value = getattr(value[0], key)
        except (IndexError, TypeError, AttributeError) as error:
            raise ValidationError(
                f"Could not read {key} from first sequence item."
            ) from error
        return self._nested.deserialize(nested_value, attr, data, **kwargs)
