"""A timed quiz read from a CSV file of question,answer rows."""

from __future__ import annotations

import argparse
import csv
import queue
import sys
import threading
import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import IO


@dataclass(frozen=True)
class Problem:
    """One question and its expected answer."""

    question: str
    answer: str


def parse_problems(lines: Iterable[Sequence[str]]) -> list[Problem]:
    """Turn CSV rows into problems; each row needs at least two fields."""
    problems = []
    for row in lines:
        if len(row) < 2:
            raise ValueError(f"row {list(row)!r} needs a question and an answer")
        problems.append(Problem(row[0], row[1]))
    return problems


def load_problems(file_name: str) -> list[Problem]:
    """Read all problems from a CSV file."""
    try:
        stream = open(file_name, newline="", encoding="utf-8")
    except OSError as err:
        raise OSError(f"error reading data in csv format from {file_name} file: {err}") from err
    with stream:
        try:
            rows = [row for row in csv.reader(stream, strict=True) if row]
            for number, row in enumerate(rows, start=1):
                if len(row) != len(rows[0]):
                    raise ValueError(f"record on line {number}: wrong number of fields")
        except (csv.Error, ValueError, UnicodeDecodeError) as err:
            raise ValueError(f"error in reading data in csv format from {file_name} file: {err}") from err
    return parse_problems(rows)


def _read_answer(stream: IO[str]) -> str:
    words = stream.readline().split()
    return words[0] if words else ""


def run_quiz(problems: Iterable[Problem], time_limit: float, input_stream: IO[str], output: IO[str]) -> int:
    """Ask each problem until the time limit for the whole quiz runs out; return the score."""
    problems = list(problems)
    answers: queue.Queue[str] = queue.Queue()
    deadline = time.monotonic() + time_limit
    correct = 0
    pending = False

    for number, problem in enumerate(problems, start=1):
        output.write(f"Problem {number}: {problem.question}=")
        output.flush()
        threading.Thread(target=lambda: answers.put(_read_answer(input_stream)), daemon=True).start()
        pending = True
        try:
            answer = answers.get(timeout=max(0.0, deadline - time.monotonic()))
        except queue.Empty:
            output.write("\n")
            break
        pending = False
        correct += answer == problem.answer

    output.write(f"Your result is {correct} out of {len(problems)}\nPress enter to exit")
    output.flush()
    if pending:
        answers.get()
    return correct


def main(argv: list[str] | None = None) -> int:
    """Run the quiz from the command line."""
    parser = argparse.ArgumentParser(description="Timed quiz from a CSV file.")
    parser.add_argument("-f", default="quiz.csv", help="path of csv file")
    parser.add_argument("-t", type=int, default=30, help="timer for the quiz")
    args = parser.parse_args(argv)
    try:
        problems = load_problems(args.f)
    except (OSError, ValueError) as err:
        print(f"something wrong: {err}")
        return 1
    run_quiz(problems, args.t, sys.stdin, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())