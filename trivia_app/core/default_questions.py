"""Built-in starter questions used when no saved catalog exists."""

from __future__ import annotations

from trivia_app.core.models import Difficulty, Question

INITIAL_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="q1",
        text="Who was swallowed by a great fish?",
        options=("Jonah", "Peter", "Paul", "Noah"),
        correct_option_index=0,
        reference="Jonah 1:17",
        difficulty=Difficulty.EASY,
        category="Old Testament",
    ),
    Question(
        id="q2",
        text="What is the shortest verse in the Bible?",
        options=("God is love", "Jesus wept", "Rejoice always", "Pray continually"),
        correct_option_index=1,
        reference="John 11:35",
        difficulty=Difficulty.MEDIUM,
        category="New Testament",
    ),
    Question(
        id="q3",
        text="Who was the first king of Israel?",
        options=("David", "Solomon", "Saul", "Samuel"),
        correct_option_index=2,
        reference="1 Samuel 10:1",
        difficulty=Difficulty.MEDIUM,
        category="Old Testament",
    ),
    Question(
        id="q4",
        text="Where was Jesus born?",
        options=("Nazareth", "Jerusalem", "Bethlehem", "Galilee"),
        correct_option_index=2,
        reference="Matthew 2:1",
        difficulty=Difficulty.EASY,
        category="Gospels",
    ),
    Question(
        id="q5",
        text="How many days did it rain during the flood?",
        options=("7 days", "40 days", "100 days", "150 days"),
        correct_option_index=1,
        reference="Genesis 7:12",
        difficulty=Difficulty.EASY,
        category="Old Testament",
    ),
)
