# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Protobuf messages for the WorkService gRPC contract.

Equivalent to:

    syntax = "proto3";
    package performance_demo;

    service WorkService {
      rpc GetWork (WorkRequest) returns (WorkResponse);
    }

    message WorkRequest {
      int32 payload_size = 1;
      string correlation_id = 2;
    }

    message WorkResponse {
      string big_string = 1;
      repeated string items = 2;
      map<string, string> metadata = 3;
    }

The descriptors are built in code into a private pool so no generated `_pb2`
module is needed.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

__all__ = [
    "GET_WORK_METHOD",
    "PACKAGE",
    "SERVICE_NAME",
    "WorkRequest",
    "WorkResponse",
]

PACKAGE = "performance_demo"
SERVICE_NAME = f"{PACKAGE}.WorkService"
GET_WORK_METHOD = f"/{SERVICE_NAME}/GetWork"

_Field = descriptor_pb2.FieldDescriptorProto


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="performance_demo/work_service.proto",
        package=PACKAGE,
        syntax="proto3",
    )

    request = file_proto.message_type.add(name="WorkRequest")
    request.field.add(
        name="payload_size", json_name="payloadSize", number=1,
        type=_Field.TYPE_INT32, label=_Field.LABEL_OPTIONAL,
    )  # fmt: skip
    request.field.add(
        name="correlation_id", json_name="correlationId", number=2,
        type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL,
    )  # fmt: skip

    response = file_proto.message_type.add(name="WorkResponse")
    response.field.add(
        name="big_string", json_name="bigString", number=1,
        type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL,
    )  # fmt: skip
    response.field.add(
        name="items", json_name="items", number=2,
        type=_Field.TYPE_STRING, label=_Field.LABEL_REPEATED,
    )  # fmt: skip
    metadata_entry = response.nested_type.add(name="MetadataEntry")
    metadata_entry.options.map_entry = True
    metadata_entry.field.add(
        name="key", json_name="key", number=1,
        type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL,
    )  # fmt: skip
    metadata_entry.field.add(
        name="value", json_name="value", number=2,
        type=_Field.TYPE_STRING, label=_Field.LABEL_OPTIONAL,
    )  # fmt: skip
    response.field.add(
        name="metadata", json_name="metadata", number=3,
        type=_Field.TYPE_MESSAGE, label=_Field.LABEL_REPEATED,
        type_name=f".{PACKAGE}.WorkResponse.MetadataEntry",
    )  # fmt: skip

    service = file_proto.service.add(name="WorkService")
    service.method.add(
        name="GetWork",
        input_type=f".{PACKAGE}.WorkRequest",
        output_type=f".{PACKAGE}.WorkResponse",
    )
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file_descriptor().SerializeToString())

WorkRequest = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.WorkRequest")
)
WorkResponse = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName(f"{PACKAGE}.WorkResponse")
)
