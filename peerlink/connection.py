import socket
import logging

from .errors import SetupError


logger = logging.getLogger('peerlink.connection')


def accept_one(port, host=''):
    try:
        server_socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    except OSError as e:
        raise SetupError(f'socket() failed: {e}') from e

    with server_socket:
        server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            server_socket.bind((host, port))
        except OSError as e:
            raise SetupError(f'bind() failed: {e}') from e

        try:
            server_socket.listen(1)
        except OSError as e:
            raise SetupError(f'listen() failed: {e}') from e

        port = server_socket.getsockname()[1]
        logger.info(f'listening on port {port} ... waiting for one peer')

        try:
            conn, address = server_socket.accept()
        except OSError as e:
            raise SetupError(f'accept() failed: {e}') from e

    logger.info(f'connected to peer {address[0]}:{address[1]}')
    return conn, address


def connect_to(host, port):
    try:
        conn = socket.create_connection((host, port))
    except socket.gaierror as e:
        raise SetupError(f'could not resolve {host}: {e}') from e
    except OSError as e:
        raise SetupError(f'connect() failed: {e}') from e

    logger.info(f'connected to {host}:{port}')
    return conn
