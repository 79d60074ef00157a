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


from abc import abstractmethod
from typing import Any, Dict, Generic, Type, TypeVar

from marshmallow import Schema, post_load, pre_load
from pydicom import Dataset

LoadType = TypeVar("LoadType")


class DicomSchema(Schema, Generic[LoadType]):
    """Schema loading attributes of a pydicom dataset into a model. Field data
    keys are DICOM keywords."""

    def load(self, dataset: Dataset, **kwargs) -> LoadType:
        item = super().load(dataset, **kwargs)  # type: ignore
        assert isinstance(item, self.load_type)
        return item

    @property
    @abstractmethod
    def load_type(self) -> Type[LoadType]:
        raise NotImplementedError()

    @pre_load
    def pre_load(self, dataset: Dataset, many: bool, **kwargs):
        attributes = {}
        for key, field in self.fields.items():
            if field.dump_only:
                continue
            if field.data_key is not None:
                key = field.data_key
            attributes[key] = dataset.get(key, None)
        return attributes

    @post_load
    def post_load(self, data: Dict[str, Any], **kwargs):
        return self.load_type(**data)
