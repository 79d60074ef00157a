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


from typing import Type

from marshmallow import fields

from xdsimaging.dicom_schema.base_dicom_schema import DicomSchema
from xdsimaging.dicom_schema.dicom_fields import (
    SequenceItemCountField,
    SequenceWrappingField,
    UidDicomField,
)
from xdsimaging.model.kos_content import KosContent, ReferencedSeries


class ReferencedSeriesDicomSchema(DicomSchema[ReferencedSeries]):
    """
    Type 1
    - series_instance_uid
    - image_count (number of items in ReferencedSOPSequence)
    Type 3
    - retrieve_url
    """

    series_instance_uid = UidDicomField(data_key="SeriesInstanceUID")
    image_count = SequenceItemCountField(
        data_key="ReferencedSOPSequence", allow_none=True
    )
    retrieve_url = fields.String(data_key="RetrieveURL", allow_none=True)

    @property
    def load_type(self) -> Type[ReferencedSeries]:
        return ReferencedSeries


class KosDicomSchema(DicomSchema[KosContent]):
    """
    Type 1
    - sop_instance_uid
    - referenced_series (ReferencedSeriesSequence of the first item in
    CurrentRequestedProcedureEvidenceSequence)
    Type 3
    - study_description
    - text_value
    """

    sop_instance_uid = UidDicomField(data_key="SOPInstanceUID")
    study_description = fields.String(data_key="StudyDescription", allow_none=True)
    text_value = fields.String(data_key="TextValue", allow_none=True)
    referenced_series = SequenceWrappingField(
        fields.List(
            fields.Nested(ReferencedSeriesDicomSchema()),
            data_key="ReferencedSeriesSequence",
        ),
        data_key="CurrentRequestedProcedureEvidenceSequence",
    )

    @property
    def load_type(self) -> Type[KosContent]:
        return KosContent
