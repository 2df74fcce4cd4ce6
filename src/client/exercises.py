"""Exercise collection store."""
from src.client.local_store import StorageKey
from src.client.resources import ResourceStore
from src.domains.exercises.models import ExerciseCategory
from src.domains.exercises.schemas import ExerciseCreate, ExerciseResponse, ExerciseUpdate


class ExerciseStore(ResourceStore[ExerciseResponse, ExerciseCreate, ExerciseUpdate]):
    """Exercises, remote-first with a local mirror."""

    record_model = ExerciseResponse
    create_model = ExerciseCreate
    update_model = ExerciseUpdate
    storage_key = StorageKey.EXERCISES
    resource_name = "exercise"

    def get_by_category(self, category: ExerciseCategory | str) -> list[ExerciseResponse]:
        category = ExerciseCategory(category)
        return [e for e in self.items if e.category == category]

    def get_by_muscle_group(self, muscle_group: str) -> list[ExerciseResponse]:
        wanted = muscle_group.strip().lower()
        return [
            e for e in self.items
            if any(g.lower() == wanted for g in e.muscle_groups)
        ]

    def search(self, term: str) -> list[ExerciseResponse]:
        """Case-insensitive match on name or muscle groups. A blank term matches everything."""
        term = term.strip().lower()
        if not term:
            return list(self.items)
        return [
            e for e in self.items
            if term in e.name.lower() or any(term in g.lower() for g in e.muscle_groups)
        ]
