from src.guests.repository.read_models import IndividualReadModel, SqlIndividualReadModel
from src.guests.repository.write_models import IndividualWriteModel, SqlIndividualWriteModel


def get_individual_read_model() -> IndividualReadModel:
    """Dependency to get individual read model instance."""
    return SqlIndividualReadModel()


def get_individual_write_model() -> IndividualWriteModel:
    """Dependency to get individual write model instance."""
    return SqlIndividualWriteModel()
