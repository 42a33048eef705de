from __future__ import annotations

from abc import ABC
from abc import abstractmethod


class LLMModelInterface(ABC):
    @abstractmethod
    def __getitem__(self, key):
        """
        Get the model registered under an (engine, model name) pair.
        """
        pass

    @abstractmethod
    def register(self, engine_name: str, model_name: str):
        """
        Register a new model.
        """
        pass
