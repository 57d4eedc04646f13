"""RPC message codec, heartbeat-based server registry and server discovery."""