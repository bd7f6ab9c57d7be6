#!/usr/bin/env python3
"""
AIKEN Quiz Runner CLI

Terminal front end for timed multiple-choice exams.
Handles bank loading, exam setup, answering, submission and results.
"""

import sys
import argparse
import getpass
from pathlib import Path
from typing import Optional

from .bank_loader import BankLoadError, is_encrypted, read_bank_text
from .config_loader import create_sample_config, load_config
from .flow import Phase, PhaseError, QuizFlow
from .models import ExamConfig
from .session import answered_count
from .timer import format_mmss, time_progress
from .translations import TRANSLATIONS


class ExamRunner:
    """Main CLI application controller."""

    def __init__(self):
        self.flow: Optional[QuizFlow] = None
        self.config: Optional[ExamConfig] = None
        self.language: str = "en"
        self.messages = TRANSLATIONS["en"]
        self.finished = False
        self._result_shown = False

    def _msg(self, key: str, /, **kwargs) -> str:
        template = self.messages.get(key, key)
        return template.format(**kwargs)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="AIKEN Quiz Runner",
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        parser.add_argument(
            "--bank",
            help="Question bank file: AIKEN text (.txt) or encrypted bank (.enc)"
        )
        parser.add_argument(
            "--config",
            help="Path to exam configuration file (default: config.json in executable directory)"
        )
        parser.add_argument("--count", type=int, help="Questions per attempt")
        parser.add_argument("--minutes", type=int, help="Time per attempt in minutes")
        parser.add_argument("--scale", type=float, help="Grade scale (e.g. 10, 20, 100)")
        parser.add_argument(
            "--language",
            choices=["en", "es"],
            default="en",
            help="Interface language (default: en)"
        )
        parser.add_argument("--log", help="Append session events to this file")
        parser.add_argument(
            "--sample-config",
            metavar="PATH",
            help="Write a sample configuration file and exit"
        )
        return parser

    def load_bank(self, bank_path: Path) -> bool:
        """
        Read a bank file and hand it to the flow.

        Returns:
            True if the bank was loaded and the flow is in Setup
        """
        key_input = None
        if is_encrypted(bank_path):
            try:
                key_input = getpass.getpass(self._msg("ask_enc_pass", bank=bank_path.name))
            except (KeyboardInterrupt, EOFError):
                print(f"\n{self._msg('enc_exit')}")
                return False
            if not key_input:
                print(self._msg("enc_error"))
                return False

        print(self._msg("bank_loading", bank=bank_path.name))
        try:
            text = read_bank_text(bank_path, key_input)
        except BankLoadError as e:
            print(self._msg("bank_error", error=e))
            return False

        if not self.flow.load_bank(text):
            print(self._msg("bank_rejected", **self.flow.error))
            return False

        print(self._msg("bank_success", count=len(self.flow.bank)))
        return True

    def run(self, argv=None) -> int:
        """Main application entry point."""
        parser = self.build_parser()
        args = parser.parse_args(argv)

        if args.sample_config:
            create_sample_config(Path(args.sample_config))
            return 0

        if not args.bank:
            parser.error("--bank is required")

        self.language = args.language
        self.messages = TRANSLATIONS[self.language]

        print(self._msg("header"))
        print(self._msg("title"))
        print(self._msg("header"))

        try:
            config_path = Path(args.config) if args.config else None
            self.config = load_config(config_path)
            src = args.config if args.config else "config.json (default)"
            print(self._msg("config_source", src=src))
        except ValueError as e:
            print(self._msg("config_error", error=e))
            return 1

        if args.count is not None:
            self.config.question_count = args.count
        if args.minutes is not None:
            self.config.exam_time_minutes = args.minutes
        if args.scale is not None:
            self.config.scale_over = args.scale

        self.flow = QuizFlow(
            config=self.config,
            log_path=Path(args.log) if args.log else None
        )
        self.flow.log("SESSION_START", f"Bank: {args.bank}")

        if not self.load_bank(Path(args.bank)):
            return 1

        self.show_setup()
        try:
            self.command_loop()
        finally:
            if self.flow.timer:
                self.flow.timer.stop()
            self.flow.log("SESSION_END")

        return 0

    def command_loop(self):
        """Main interactive command loop."""
        while not self.finished:
            try:
                self._announce_auto_submit()

                cmd_line = input(f"{self.flow.phase.value}> ").strip()
                if not cmd_line:
                    continue

                # The timer may have fired while waiting for input
                if self._announce_auto_submit():
                    continue

                parts = cmd_line.split()
                command = parts[0].lower()
                self.flow.log("COMMAND_RUN", f"Command: {cmd_line}")

                if command in ['exit', 'quit']:
                    self.cmd_quit()
                elif self.flow.phase == Phase.SETUP:
                    self.setup_command(command, parts[1:])
                elif self.flow.phase == Phase.EXAM:
                    self.exam_command(command, parts[1:])
                elif self.flow.phase == Phase.RESULT:
                    self.result_command(command, parts[1:])
                elif command == "load":
                    self.cmd_load(parts[1:])
                else:
                    print(self._msg("upload_help"))

            except PhaseError:
                # The timer may have submitted the exam while the command ran
                if not self._announce_auto_submit():
                    raise
            except (KeyboardInterrupt, EOFError):
                print()
                self.cmd_quit()

    def _announce_auto_submit(self) -> bool:
        """Show results once after the timer submitted the exam on its own."""
        if self.flow.phase != Phase.RESULT or self._result_shown:
            return False
        self._result_shown = True
        if self.flow.session.auto_submitted:
            print("\n" + "!" * 60)
            print(self._msg("time_up"))
            print("!" * 60)
        self.show_result()
        return True

    # ===== SETUP =====

    def show_setup(self):
        settings = self.flow.effective_config()
        print()
        print(self._msg("setup_header", bank_size=len(self.flow.bank)))
        print(self._msg(
            "setup_preview",
            count=settings.question_count,
            minutes=settings.exam_time_minutes,
            scale=settings.scale_over
        ))
        print(self._msg("setup_help"))

    def setup_command(self, command: str, args):
        setters = {
            "count": lambda v: self.flow.configure(question_count=int(v)),
            "minutes": lambda v: self.flow.configure(exam_time_minutes=int(v)),
            "scale": lambda v: self.flow.configure(scale_over=float(v)),
        }
        if command in setters:
            if not args:
                print(self._msg("setup_value_error", command=command))
                return
            try:
                setters[command](args[0])
            except ValueError:
                print(self._msg("setup_value_error", command=command))
                return
            self.show_setup()
        elif command == "start":
            self.cmd_start()
        elif command == "help":
            print(self._msg("setup_help"))
        else:
            print(self._msg("unknown_command", command=command))

    def cmd_start(self):
        started = self.flow.retry() if self.flow.phase == Phase.RESULT else self.flow.start()
        if not started:
            print(self._msg("empty_bank"))
            return
        self._result_shown = False
        settings = self.flow.effective_config()
        print()
        print(self._msg(
            "exam_started",
            count=len(self.flow.session.questions),
            minutes=settings.exam_time_minutes
        ))
        self.cmd_show()

    # ===== EXAM =====

    def exam_command(self, command: str, args):
        if command == "show":
            self.cmd_show()
        elif command in ("next", "n"):
            self.flow.next()
            self.cmd_show()
        elif command in ("prev", "p"):
            self.flow.previous()
            self.cmd_show()
        elif command == "goto":
            if not args or not args[0].isdigit():
                print(self._msg("goto_usage"))
                return
            self.flow.go_to(int(args[0]))
            self.cmd_show()
        elif command == "answer":
            if not args:
                print(self._msg("answer_usage"))
                return
            self.cmd_answer(args[0])
        elif len(command) == 1 and command.isalpha():
            self.cmd_answer(command)
        elif command == "flag":
            self.cmd_flag()
        elif command == "status":
            self.cmd_status()
        elif command == "time":
            self.cmd_time()
        elif command == "submit":
            self.cmd_submit()
        elif command == "help":
            print(self._msg("exam_help"))
        else:
            print(self._msg("unknown_command", command=command))

    def cmd_show(self):
        """Display the current question with its options."""
        session = self.flow.session
        question = self.flow.current_question()
        chosen = session.answers.get(question.id)

        print()
        print(self._msg(
            "question_heading",
            number=session.index + 1,
            total=len(session.questions),
            answered=answered_count(session),
            time=format_mmss(self.flow.seconds_left())
        ))
        if session.flagged.get(question.id):
            print(self._msg("question_flagged"))
        print()
        print(question.stem)
        print()
        for option in question.options:
            marker = ">" if chosen and chosen.upper() == option.key else " "
            print(f" {marker} {option.key}. {option.text}")
        print()

    def cmd_answer(self, key: str):
        key = key.upper()
        self.flow.answer(key)
        print(self._msg("answer_saved", key=key, number=self.flow.session.index + 1))

    def cmd_flag(self):
        self.flow.toggle_flag()
        session = self.flow.session
        question = self.flow.current_question()
        key = "flag_on" if session.flagged.get(question.id) else "flag_off"
        print(self._msg(key, number=session.index + 1))

    def cmd_status(self):
        session = self.flow.session
        print()
        for i, question in enumerate(session.questions):
            answered = session.answers.get(question.id)
            print(self._msg(
                "status_line",
                number=i + 1,
                answered=f"{self._msg('status_answered')} ({answered})" if answered else self._msg("status_unanswered"),
                flag=self._msg("status_flagged") if session.flagged.get(question.id) else ""
            ).rstrip())
        print()

    def cmd_time(self):
        """Display remaining exam time."""
        left = self.flow.seconds_left()
        total = self.flow.session.duration_seconds
        print(self._msg("time_left", time=format_mmss(left), progress=time_progress(left, total)))

    def cmd_submit(self):
        session = self.flow.session
        unanswered = len(session.questions) - answered_count(session)
        if unanswered:
            try:
                confirm = input(self._msg("submit_confirm", unanswered=unanswered)).strip().lower()
            except (KeyboardInterrupt, EOFError):
                confirm = ""
            if confirm != 'y':
                print(self._msg("submit_cancel"))
                return

        self.flow.submit()
        self._announce_auto_submit()

    # ===== RESULT =====

    def show_result(self):
        report = self.flow.report()
        print()
        print(self._msg("header"))
        print(self._msg("result_header"))
        print(self._msg("header"))
        print(self._msg(
            "result_score",
            correct=report.score.correct,
            incorrect=report.score.incorrect,
            total=report.score.total
        ))
        print(self._msg("result_grade", grade=report.grade, scale=report.scale_over))
        print()
        print(self._msg("result_help"))

    def result_command(self, command: str, args):
        if command == "review":
            self.cmd_review()
        elif command == "retry":
            self.cmd_start()
        elif command == "setup":
            self.flow.reconfigure()
            self.show_setup()
        elif command == "load":
            if not args:
                print(self._msg("load_usage"))
                return
            self.flow.reset()
            self.cmd_load(args)
        elif command == "help":
            print(self._msg("result_help"))
        else:
            print(self._msg("unknown_command", command=command))

    def cmd_load(self, args):
        """Load another bank while in Upload."""
        if not args:
            print(self._msg("load_usage"))
            return
        if self.load_bank(Path(" ".join(args))):
            self.show_setup()
        else:
            print(self._msg("upload_help"))

    def cmd_review(self):
        print()
        for item in self.flow.report().items:
            print(self._msg(
                "review_line",
                number=item.number,
                verdict=self._msg("review_correct") if item.is_correct else self._msg("review_incorrect"),
                chosen=item.chosen or self._msg("review_unanswered"),
                answer=item.question.answer_key
            ))
            print(f"   {item.question.stem.splitlines()[0]}")
        print()

    def cmd_quit(self):
        print(self._msg("goodbye"))
        self.finished = True


def main():
    """Entry point for the exam runner."""
    runner = ExamRunner()
    sys.exit(runner.run())


if __name__ == "__main__":
    main()
