"""
Study service factory.
Centralizes wiring the vault adapter into the application service.
"""

from openwords.application.config import AppConfig
from openwords.application.study_service import StudyService
from openwords.infrastructure.vault_store import VaultStore


def get_word_store(config: AppConfig) -> VaultStore:
    return VaultStore(config.words_dir, field_names=config.field_names)


def get_study_service(config: AppConfig, *, scan: bool = True) -> StudyService:
    """
    Returns a StudyService over the configured word folder.

    With scan=True (the default) the registry is populated before returning.
    """
    service = StudyService(get_word_store(config), config)
    if scan:
        service.init()
    return service
