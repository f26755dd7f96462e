from .acceptor import AF_VSOCK, VMADDR_CID_ANY, accept_one
