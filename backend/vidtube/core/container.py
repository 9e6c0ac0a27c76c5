from dependency_injector import containers, providers

from vidtube.core.config import configs
from vidtube.services.storage_service import StorageService


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
            "vidtube.api.v1.endpoints.users",
            "vidtube.api.v1.endpoints.videos",
        ]
    )

    storage_service = providers.Singleton(
        StorageService,
        connection_string=configs.AZURE_STORAGE_CONNECTION_STRING,
        container=configs.AZURE_BLOB_CONTAINER,
    )
