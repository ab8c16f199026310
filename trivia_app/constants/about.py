"""Static metadata describing Scripture Scholar."""

APP_NAME = "Scripture Scholar"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "Scripture Scholar is a Bible trivia companion served to the browser. "
    "Play a timed quiz with streaks and lifelines, review questions as flashcards, "
    "or manage the question bank by hand, from files or with AI assistance."
)

HELP_TEXT = (
    "Questions can be imported from JSON, CSV or a plain-text file using the format:\n\n"
    "Q: Who was swallowed by a great fish?\n"
    "A: Jonah\nB: Peter\nC: Paul\nD: Noah\n"
    "CORRECT: A\nREFERENCE: Jonah 1:17\nDIFFICULTY: Easy\nCATEGORY: Old Testament\n\n"
    "Q: Where was Jesus born?\n"
    "A: Nazareth\nB: Jerusalem\nC: Bethlehem\nD: Galilee\n"
    "CORRECT: C\nREFERENCE: Matthew 2:1"
)
