from __future__ import annotations

STRINGS: dict[str, dict[str, str]] = {
    "help": {
        "en": (
            "📚 Send the exercise as a PDF (or /exercise followed by its text) to register it.\n"
            "Then send your answers as text or a photo and I will check them.\n"
            "/answerkey shows the answer key of the current exercise."
        ),
        "uk": (
            "📚 Надішліть вправу у PDF (або /exercise і текст вправи), щоб зареєструвати її.\n"
            "Потім надішліть відповіді текстом або фото, і я їх перевірю.\n"
            "/answerkey показує ключ відповідей поточної вправи."
        ),
    },
    "exercise_saved": {
        "en": "✅ Exercise saved. ID: {exercise_id}",
        "uk": "✅ Вправу збережено. ID: {exercise_id}",
    },
    "exercise_not_active": {
        "en": "⚠️ Exercise {exercise_id} was checked but could not be saved, so it is not active. Send it again later.",
        "uk": "⚠️ Вправу {exercise_id} перевірено, але не вдалося зберегти, тому вона не активна. Надішліть її пізніше ще раз.",
    },
    "no_exercise": {
        "en": "⚠️ No exercise registered yet. Send the exercise first.",
        "uk": "⚠️ Вправу ще не зареєстровано. Спочатку надішліть вправу.",
    },
    "answer_key_missing": {
        "en": "⚠️ Answer key not found for exercise {exercise_id}. Send the exercise again.",
        "uk": "⚠️ Ключ відповідей для вправи {exercise_id} не знайдено. Надішліть вправу ще раз.",
    },
    "exercise_text_missing": {
        "en": "⚠️ Exercise text not found for exercise {exercise_id}. Send the exercise again.",
        "uk": "⚠️ Текст вправи {exercise_id} не знайдено. Надішліть вправу ще раз.",
    },
    "no_text_extracted": {
        "en": "⚠️ No text extracted.",
        "uk": "⚠️ Не вдалося отримати текст.",
    },
    "exercise_failed": {
        "en": "❌ Could not register the exercise: {reason}",
        "uk": "❌ Не вдалося зареєструвати вправу: {reason}",
    },
    "grading_failed": {
        "en": "❌ Grading failed: {reason}",
        "uk": "❌ Не вдалося перевірити відповіді: {reason}",
    },
    "nothing_graded": {
        "en": "🤷 No answered questions found.",
        "uk": "🤷 Не знайдено жодної відповіді.",
    },
    "unexpected_error": {
        "en": "😔 Something went wrong: {reason}",
        "uk": "😔 Щось пішло не так: {reason}",
    },
    "unsupported": {
        "en": "📝 I can only process text, images and PDF documents.",
        "uk": "📝 Я обробляю лише текст, зображення та PDF-документи.",
    },
    "submissions_count": {
        "en": "📥 Exercise {exercise_id}: {count} submission(s).",
        "uk": "📥 Вправа {exercise_id}: надіслано відповідей: {count}.",
    },
    "forbidden": {"en": "Forbidden", "uk": "Заборонено"},
}

def t(key: str, lang: str, **kwargs) -> str:
    text = STRINGS.get(key, {}).get(lang, STRINGS.get(key, {}).get("en", key))
    return text.format(**kwargs) if kwargs else text
