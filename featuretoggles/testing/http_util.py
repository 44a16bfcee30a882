import json
import queue
import socket
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread


def get_available_port():
    s = socket.socket(socket.AF_INET, type=socket.SOCK_STREAM)
    s.bind(('localhost', 0))
    _, port = s.getsockname()
    s.close()
    return port


def poll_until_started(port):
    deadline = time.time() + 1
    while time.time() < deadline:
        s = socket.socket()
        try:
            s.connect(('localhost', port))
            return
        except socket.error:
            pass
        finally:
            s.close()
        time.sleep(0.05)
    raise Exception("test server on port %d was not reachable" % port)


def start_server():
    sw = MockServerWrapper(get_available_port())
    sw.start()
    poll_until_started(sw.port)
    return sw


class MockServerWrapper(Thread):
    """A local HTTP server that answers each path with a canned response and records requests."""

    def __init__(self, port):
        Thread.__init__(self, name="featuretoggles.testing.mock-server-wrapper")
        self.daemon = True
        self.port = port
        self.uri = 'http://localhost:%d' % port
        self.server = HTTPServer(('localhost', port), MockServerRequestHandler)
        self.server.server_wrapper = self
        self.matchers = {}
        self.requests = queue.Queue()

    def close(self):
        self.server.shutdown()
        self.server.server_close()

    def run(self):
        self.server.serve_forever(0.1)  # 0.1 seconds is how often it'll check to see if it is shutting down

    def for_path(self, uri_path, content):
        self.matchers[uri_path] = content
        return self

    def require_request(self):
        return self.requests.get(block=False)

    def request_count(self):
        return self.requests.qsize()

    # enter/exit magic methods allow server to be auto-closed by "with" statement
    def __enter__(self):
        return self

    def __exit__(self, type, value, traceback):
        self.close()


class MockServerRequestHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        server_wrapper = self.server.server_wrapper
        server_wrapper.requests.put(MockServerRequest(self))
        handler = server_wrapper.matchers.get(self.path)
        if handler:
            handler.write(self)
        else:
            self.send_error(404)

    def log_message(self, format, *args):
        pass


class MockServerRequest:
    def __init__(self, request):
        self.method = request.command
        self.path = request.path
        self.headers = request.headers

    def __str__(self):
        return "%s %s" % (self.method, self.path)


class BasicResponse:
    def __init__(self, status, body=None, headers=None):
        self.status = status
        self.body = body
        self.headers = headers or {}

    def write(self, request):
        request.send_response(self.status)
        for key, value in self.headers.items():
            request.send_header(key, value)
        request.send_header('Content-Length', str(len(self.body.encode('UTF-8')) if self.body else 0))
        request.end_headers()
        if self.body:
            request.wfile.write(self.body.encode('UTF-8'))


class JsonResponse(BasicResponse):
    def __init__(self, data, headers=None):
        h = headers or {}
        h.update({'Content-Type': 'application/json'})
        BasicResponse.__init__(self, 200, json.dumps(data), h)


class SequentialHandler:
    """Uses each handler in turn, then keeps repeating the last one."""

    def __init__(self, *argv):
        self.handlers = argv
        self.counter = 0

    def write(self, request):
        handler = self.handlers[self.counter]
        if self.counter < len(self.handlers) - 1:
            self.counter += 1
        handler.write(request)
