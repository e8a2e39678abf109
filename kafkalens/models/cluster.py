"""Cluster models for API requests and responses."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from kafkalens.models.access_context import AccessContext


class KafkaCluster(BaseModel):
    """Cluster as listed to the user."""

    name: str


class AccessCheck(BaseModel):
    """Resources and actions an operation on one cluster requires."""

    cluster_config_actions: List[str] = Field(default_factory=list)
    topic: Optional[str] = None
    topic_actions: List[str] = Field(default_factory=list)
    consumer_group: Optional[str] = None
    consumer_group_actions: List[str] = Field(default_factory=list)
    connect: Optional[str] = None
    connect_actions: List[str] = Field(default_factory=list)
    connector: Optional[str] = None
    schema_name: Optional[str] = Field(None, alias="schema")
    schema_actions: List[str] = Field(default_factory=list)
    ksql_actions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_context(self, cluster: str, request=None) -> AccessContext:
        builder = (
            AccessContext.builder(request)
            .cluster(cluster)
            .cluster_config_actions(*self.cluster_config_actions)
            .topic_actions(*self.topic_actions)
            .consumer_group_actions(*self.consumer_group_actions)
            .connect_actions(*self.connect_actions)
            .schema_actions(*self.schema_actions)
            .ksql_actions(*self.ksql_actions)
        )
        if self.topic is not None:
            builder.topic(self.topic)
        if self.consumer_group is not None:
            builder.consumer_group(self.consumer_group)
        if self.connect is not None:
            builder.connect(self.connect)
        if self.connector is not None:
            builder.connector(self.connector)
        if self.schema_name is not None:
            builder.schema(self.schema_name)
        return builder.build()


class ResourceAccess(BaseModel):
    """Result of a single-object access check."""

    cluster: str
    resource: str
    name: str
    allowed: bool
