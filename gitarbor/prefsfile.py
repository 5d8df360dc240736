import dataclasses
import enum
import json
import logging
import os
import typing
from types import NoneType, UnionType
from typing import Any, Type

logger = logging.getLogger(__name__)


class PrefsFile:
    """
    Dataclass mixin that persists its public fields to a JSON file.
    Fields left at their default values aren't written out.
    """

    _filename = ""
    _allowMakeDirs = True
    _parentDir = ""

    def getParentDir(self) -> str:
        return self._parentDir

    def _getFullPath(self, forWriting: bool) -> str:
        assert self._filename != "", "you must override _filename"

        prefsDir = self.getParentDir()
        if not prefsDir:
            return ""

        if forWriting:
            if self._allowMakeDirs:
                os.makedirs(prefsDir, exist_ok=True)
            elif not os.path.isdir(prefsDir):
                return ""

        fullPath = os.path.join(prefsDir, self._filename)

        if not forWriting and not os.path.isfile(fullPath):
            return ""

        return fullPath

    def reset(self):
        assert dataclasses.is_dataclass(self)
        for f in dataclasses.fields(self):
            if f.default_factory != dataclasses.MISSING:
                obj = f.default_factory()
            else:
                obj = f.default
            self.__dict__[f.name] = obj

    def write(self) -> str:
        prefsPath = self._getFullPath(forWriting=True)
        if not prefsPath:
            logger.warning("Couldn't get path for writing")
            return ""

        assert dataclasses.is_dataclass(self)
        fields: dict[str, dataclasses.Field] = self.__dataclass_fields__
        filtered = {}
        for key, field in fields.items():
            if key.startswith("_"):
                continue

            if field.default_factory != dataclasses.MISSING:
                default = field.default_factory()
            else:
                default = field.default

            value = self.__dict__[key]
            if value == default:
                continue

            filtered[key] = self.encode(value)

        # Don't clutter the git dir with an empty object
        if not filtered:
            if os.path.isfile(prefsPath):
                logger.debug("Deleting prefs file because we want defaults")
                os.unlink(prefsPath)
            return ""

        with open(prefsPath, 'wt', encoding='utf-8') as jsonFile:
            json.dump(obj=filtered, fp=jsonFile, indent='\t')

        logger.info(f"Wrote {prefsPath}")
        return prefsPath

    def load(self) -> bool:
        prefsPath = self._getFullPath(forWriting=False)
        if not prefsPath:  # couldn't be found
            return False
        return self.loadFrom(prefsPath)

    def loadFrom(self, prefsPath: str) -> bool:
        with open(prefsPath, 'rt', encoding='utf-8') as file:
            try:
                jsonObject = json.load(file)
            except ValueError as loadError:
                logger.warning(f"{prefsPath}: {loadError}", exc_info=True)
                return False

        if not isinstance(jsonObject, dict):
            logger.warning(f"{prefsPath}: top-level JSON value isn't an object")
            return False

        assert dataclasses.is_dataclass(self)
        fields: dict[str, dataclasses.Field] = self.__dataclass_fields__

        for key, value in jsonObject.items():
            if key.startswith('_') or key not in fields:
                logger.warning(f"{prefsPath}: dropping key: {key}")
                continue
            if value is None:
                continue

            try:
                value = self.decode(value, fields[key].type)
            except ValueError as error:
                logger.warning(f"{prefsPath}: {key}: {error}")
                continue

            self.__dict__[key] = value

        return True

    @staticmethod
    def encode(o: Any) -> Any:
        """ Encode a value to make it JSON-friendly """
        if isinstance(o, enum.Enum):
            return o.value
        elif type(o) is set:
            return sorted(o)
        return o

    @staticmethod
    def decode(o: Any, dstType: Type | UnionType) -> Any:
        """ Convert a value coming from a JSON blob to a target type """

        # Extract type from "SomeType | None" unions
        if type(dstType) is UnionType:
            union = typing.get_args(dstType)
            assert len(union) == 2
            dstType = next(t for t in union if t is not NoneType)

        if dstType is set:
            srcType = list
        elif issubclass(dstType, enum.StrEnum):
            srcType = str
        elif issubclass(dstType, (enum.IntEnum, enum.Enum)):
            srcType = int
        else:
            srcType = dstType

        # bool is a subclass of int; don't let a stray true/false pass for a number
        if not isinstance(o, srcType) or (srcType is int and type(o) is bool):
            raise ValueError("unexpected JSON field type")

        if srcType is not dstType:
            o = dstType(o)

        return o
