from .remote_write import RemoteWriteEncoder
