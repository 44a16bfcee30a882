"""
This submodule contains interfaces for components of the SDK that can be replaced.

They may be useful in writing new implementations of these components, or for testing.
"""

from abc import ABCMeta, abstractmethod
from typing import Optional

from featuretoggles.impl.model import ToggleSnapshot


class FeatureRequester(metaclass=ABCMeta):
    """
    Interface for the component that retrieves toggle data from the toggle source.

    Implementations are responsible for their own bounded retries. Neither method should
    raise for transport problems: a failed check reports "unchanged" and a failed fetch
    reports None, so the caller can simply try again on its next cycle.
    """

    @abstractmethod
    def have_features_changed(self, content_hash: bytes) -> bool:
        """
        Asks the source whether its toggle content differs from the given content hash.

        :param content_hash: the content hash of the snapshot currently held; empty if none
        :return: True if a new manifest should be fetched
        """

    @abstractmethod
    def get_manifest(self) -> Optional[ToggleSnapshot]:
        """
        Retrieves the full set of toggles.

        :return: the new snapshot, or None if the toggles were not found, the response had no
            content hash, or the content could not be decoded
        """

    def cancel(self):
        """
        Abandons any pending retries so that an in-flight call returns promptly. Called before
        the background refresh is joined. The default implementation does nothing.
        """
        pass

    def close(self):
        """
        Releases network resources. Called once no further requests can be made. The default
        implementation does nothing.
        """
        pass
