import json
from pathlib import Path
from pydantic import BaseModel, Field, ValidationError

from ..domain.errors import MetadataWriteFailed
from ..domain.models import LayerMetadata


def already_installed(metadata: LayerMetadata, version: str) -> bool:
    """true iff the layer already holds exactly this version."""
    return metadata.version is not None and metadata.version == version


class Layer(BaseModel):
    """a target directory plus the metadata describing what was installed in it."""
    path: Path
    metadata: LayerMetadata = Field(default_factory=LayerMetadata)

    @property
    def metadata_path(self) -> Path:
        # metadata sits next to the directory, never inside it
        return self.path.parent / f"{self.path.name}.json"

    @classmethod
    def load(cls, path: Path) -> "Layer":
        """open a layer, reading persisted metadata when present.

        unreadable or malformed metadata is treated as absent, which forces a reinstall.
        """
        layer = cls(path=Path(path))
        try:
            data = json.loads(layer.metadata_path.read_text(encoding="utf-8"))
            layer.metadata = LayerMetadata.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError):
            pass
        return layer

    def save_metadata(self):
        try:
            self.metadata_path.parent.mkdir(parents=True, exist_ok=True)
            self.metadata_path.write_text(self.metadata.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            raise MetadataWriteFailed(self.metadata_path, str(e)) from e
