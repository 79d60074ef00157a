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


from typing import Optional, Union

from marshmallow import ValidationError, fields

from xdsimaging.model import KosDocument


class KosReferenceJsonField(fields.Field):
    """A linked KOS document, serialized as its unique id. Loads the unique id,
    resolved to the document by the document set schema."""

    def _serialize(
        self, value: Optional[Union[KosDocument, str]], attr, obj, **kwargs
    ) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, KosDocument):
            return value.unique_id
        return value

    def _deserialize(self, value, attr, data, **kwargs) -> str:
        if not isinstance(value, str):
            raise ValidationError("Could not deserialize KOS reference.")
        return value
