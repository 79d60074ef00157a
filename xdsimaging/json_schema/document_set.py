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


from marshmallow import Schema, ValidationError, fields, post_load

from xdsimaging.json_schema.document import (
    KosDocumentJsonSchema,
    ReportDocumentJsonSchema,
)
from xdsimaging.json_schema.patient import PatientInfoJsonSchema
from xdsimaging.model import DocumentSet


class DocumentSetJsonSchema(Schema):
    """Document set with the linked KOS documents of each report given by
    unique id."""

    patient_info = fields.Nested(PatientInfoJsonSchema(), allow_none=True)
    reports = fields.List(fields.Nested(ReportDocumentJsonSchema()))
    kos_objects = fields.List(fields.Nested(KosDocumentJsonSchema()))

    @post_load
    def load_to_object(self, data, **kwargs):
        document_set = DocumentSet(**data)
        kos_by_id = {kos.unique_id: kos for kos in document_set.kos_objects}
        for report in document_set.reports:
            try:
                report.ref_kos = [kos_by_id[unique_id] for unique_id in report.ref_kos]
            except KeyError as error:
                raise ValidationError(
                    f"Report {report.unique_id} links to unknown KOS {error}."
                ) from error
        return document_set
