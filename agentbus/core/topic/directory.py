"""Topic discovery."""

from typing import List

from agentbus.core.log.storage import TopicStorage


class TopicDirectory:
    """
    Lists topics by scanning storage.
    
    Nothing is cached: the result reflects the files on disk at call time,
    which are created only by a successful first append.
    """
    
    def __init__(self, storage: TopicStorage):
        self.storage = storage
    
    def list_topics(self) -> List[str]:
        """
        List all topic names.
        
        Returns:
            Sorted topic names
        """
        return self.storage.list_containers()
