"""Integration tests for the bulk import endpoints."""
import json

from httpx import AsyncClient

from src.domains.exercises.models import Exercise

EXERCISE_CSV = """name,category,muscle groups,notes
Push-up,strength,chest;triceps,Bodyweight
Bent Over Row,strength,back|biceps,
"""

WORKOUT_JSON = {
    "workouts": [
        {
            "name": "Morning Session",
            "date": "2024-02-10T08:00:00Z",
            "exercises": [
                {
                    "exerciseName": "Bench Press",
                    "sets": [
                        {"setNumber": 1, "reps": 10, "weight": 60},
                        {"setNumber": 2, "reps": 8, "weight": 65},
                    ],
                },
                {
                    "exerciseName": "Kettlebell Swing",
                    "sets": [{"reps": 20, "weight": 16}],
                },
            ],
        }
    ]
}


class TestImportExercises:
    """Tests for POST /api/import/exercises."""

    async def test_import_csv(self, client: AsyncClient):
        response = await client.post(
            "/api/import/exercises",
            files={"file": ("exercises.csv", EXERCISE_CSV, "text/csv")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["summary"] == {"total": 2, "imported": 2, "skipped": 0, "errors": 0}
        assert [e["name"] for e in data["imported"]] == ["Push-up", "Bent Over Row"]
        assert "errors" not in data

        listed = await client.get("/api/exercises")
        by_name = {e["name"]: e for e in listed.json()}
        assert by_name["Push-up"]["muscle_groups"] == ["chest", "triceps"]
        assert by_name["Bent Over Row"]["muscle_groups"] == ["back", "biceps"]

    async def test_existing_names_are_skipped(self, client: AsyncClient, sample_exercise: Exercise):
        content = "name,category,musclegroups\nbench press,strength,chest\nDips,strength,triceps\n"

        response = await client.post(
            "/api/import/exercises",
            files={"file": ("exercises.csv", content, "text/csv")},
        )

        data = response.json()
        assert data["summary"]["imported"] == 1
        assert data["summary"]["skipped"] == 1
        assert data["skipped"] == ["bench press"]

    async def test_invalid_rows_reject_the_file(self, client: AsyncClient):
        content = "name,category,muscle groups\nPush-up,strength,chest\nTango,dance,legs\n"

        response = await client.post(
            "/api/import/exercises",
            files={"file": ("exercises.csv", content, "text/csv")},
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Failed to parse file"
        assert len(data["details"]) == 1
        assert data["details"][0].startswith("Row 3:")

        listed = await client.get("/api/exercises")
        assert listed.json() == []

    async def test_import_xml(self, client: AsyncClient):
        content = """<exercises>
            <exercise>
                <name>Plank</name>
                <category>strength</category>
                <muscleGroups><muscleGroup>abs</muscleGroup></muscleGroups>
            </exercise>
        </exercises>"""

        response = await client.post(
            "/api/import/exercises",
            files={"file": ("exercises.xml", content, "application/xml")},
        )

        assert response.status_code == 200
        assert response.json()["imported"][0]["name"] == "Plank"

    async def test_type_from_mime_when_no_extension(self, client: AsyncClient):
        content = json.dumps([{"name": "Burpee", "category": "cardio", "muscleGroups": ["full body"]}])

        response = await client.post(
            "/api/import/exercises",
            files={"file": ("upload", content, "application/json; charset=utf-8")},
        )

        assert response.status_code == 200
        assert response.json()["imported"][0]["category"] == "cardio"

    async def test_unsupported_type(self, client: AsyncClient):
        response = await client.post(
            "/api/import/exercises",
            files={"file": ("exercises.txt", "hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported file type. Please upload CSV, JSON, or XML files."}

    async def test_non_utf8_content(self, client: AsyncClient):
        response = await client.post(
            "/api/import/exercises",
            files={"file": ("exercises.csv", b"name\xff,category\n", "text/csv")},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "File must be UTF-8 encoded text"}


class TestImportWorkouts:
    """Tests for POST /api/import/workouts."""

    async def test_import_json(self, client: AsyncClient, sample_exercise: Exercise):
        response = await client.post(
            "/api/import/workouts",
            files={"file": ("history.json", json.dumps(WORKOUT_JSON), "application/json")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["total"] == 1
        assert data["summary"]["imported"] == 1
        entry = data["imported"][0]
        assert entry["name"] == "Morning Session"
        assert entry["exercise_count"] == 2
        assert entry["total_sets"] == 3

        workouts = (await client.get("/api/workouts")).json()
        assert len(workouts) == 1
        workout = workouts[0]
        assert workout["status"] == "completed"
        assert all(s["completed"] for e in workout["exercises"] for s in e["sets"])
        assert workout["exercises"][0]["exercise_id"] == str(sample_exercise.id)

    async def test_unknown_exercises_are_created(self, client: AsyncClient):
        await client.post(
            "/api/import/workouts",
            files={"file": ("history.json", json.dumps(WORKOUT_JSON), "application/json")},
        )

        exercises = {e["name"]: e for e in (await client.get("/api/exercises")).json()}
        swing = exercises["Kettlebell Swing"]
        assert swing["category"] == "other"
        assert swing["muscle_groups"] == ["full body"]
        assert swing["notes"] == "Auto-created during workout import"

    async def test_import_csv_groups_rows(self, client: AsyncClient):
        content = (
            "workout,date,exercise,set,reps,weight\n"
            "Legs,2024-02-01,Squat,1,5,100\n"
            "Legs,2024-02-01,Squat,2,5,100\n"
            "Legs,2024-02-01,Lunge,1,10,20\n"
            "Arms,2024-02-02,Curl,1,12,15\n"
        )

        response = await client.post(
            "/api/import/workouts",
            files={"file": ("history.csv", content, "text/csv")},
        )

        data = response.json()
        assert data["summary"]["imported"] == 2
        by_name = {e["name"]: e for e in data["imported"]}
        assert by_name["Legs"]["exercise_count"] == 2
        assert by_name["Legs"]["total_sets"] == 3
        assert by_name["Arms"]["total_sets"] == 1

    async def test_invalid_workout_rejects_the_file(self, client: AsyncClient):
        content = json.dumps({"name": "No Date", "exercises": []})

        response = await client.post(
            "/api/import/workouts",
            files={"file": ("history.json", content, "application/json")},
        )

        assert response.status_code == 400
        details = response.json()["details"]
        assert "Workout date is required" in details[0]
        assert "Workout must have at least one exercise" in details[0]
