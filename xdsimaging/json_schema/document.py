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


from marshmallow import Schema, fields, post_load

from xdsimaging.json_schema.fields import KosReferenceJsonField
from xdsimaging.json_schema.series import SeriesJsonSchema
from xdsimaging.model import KosDocument, Report, ReportDocument


class ReportJsonSchema(Schema):
    author = fields.String()
    title = fields.String()
    pdf = fields.String()

    @post_load
    def load_to_object(self, data, **kwargs):
        return Report(**data)


class RegistryDocumentJsonSchema(Schema):
    unique_id = fields.String()
    repository_id = fields.String()
    accession_number = fields.String()
    sop_instance_uid = fields.String()
    description = fields.String()
    creation_time = fields.String()
    retrieve_url = fields.String()
    modalities = fields.List(fields.String())
    anatomic_regions = fields.List(fields.String())


class KosDocumentJsonSchema(RegistryDocumentJsonSchema):
    series = fields.List(fields.Nested(SeriesJsonSchema()))

    @post_load
    def load_to_object(self, data, **kwargs):
        return KosDocument(**data)


class ReportDocumentJsonSchema(RegistryDocumentJsonSchema):
    exam_date = fields.String()
    ref_kos = fields.List(KosReferenceJsonField())
    report = fields.Nested(ReportJsonSchema(), allow_none=True)

    @post_load
    def load_to_object(self, data, **kwargs):
        return ReportDocument(**data)
