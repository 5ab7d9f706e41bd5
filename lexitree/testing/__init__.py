"""Testing utilities for LexiTree consumers."""

from .fixtures import RegistryTestHelper, sentence_of

__all__ = ['RegistryTestHelper', 'sentence_of']
