# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import os
from abc import ABCMeta
from abc import abstractmethod
from typing import Sequence


class Command(metaclass=ABCMeta):

    @abstractmethod
    def run(self, host: str):
        pass


class Fleet:
    """Hosts that get the same commands, one host at a time."""

    def __init__(self, hosts: Sequence[str]):
        self._hosts = hosts

    def __repr__(self):
        return f'{Fleet.__name__}({self._hosts!r})'

    def run(self, commands: Sequence[Command]):
        for host in self._hosts:
            for command in commands:
                print(f"Command {command!r}")
                questionnaire = Questionnaire("Run on")
                if questionnaire.user_agrees_with(host):
                    command.run(host)


class Questionnaire:
    """Ask before acting if PROVISIONING_ASK_FOR_CONFIRMATION is set.

    Answers: y - yes, n - no, a - yes to all, d - no to all.
    """

    def __init__(self, prompt):
        self._prompt = prompt
        self._answer_to_all = None

    def user_agrees_with(self, question) -> bool:
        if not os.getenv('PROVISIONING_ASK_FOR_CONFIRMATION', ''):
            return True
        prompt = f"{self._prompt} {question} [y,n,a,d]? "
        if self._answer_to_all is not None:
            print(prompt + ('a' if self._answer_to_all else 'd'), flush=True)
            return self._answer_to_all
        while True:
            answer = input(prompt)[:1].lower()
            if answer == 'y':
                return True
            elif answer == 'n':
                return False
            elif answer in ('a', 'd'):
                self._answer_to_all = answer == 'a'
                return self._answer_to_all
