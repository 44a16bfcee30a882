import logging
import sys

import featuretoggles
from featuretoggles import Config

root = logging.getLogger()
root.setLevel(logging.DEBUG)

ch = logging.StreamHandler(sys.stdout)
ch.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s')
ch.setFormatter(formatter)
root.addHandler(ch)

if __name__ == '__main__':
    featuretoggles.set_config(Config('YOUR_CLIENT_IDENTIFIER', application={'name': 'demo', 'version': '1.0.0'}))

    context = {'license': 'trial', 'tenant': 'tenant-1'}
    print(featuretoggles.get().resolve_boolean("update-app", False, context))

    featuretoggles.get().close()
