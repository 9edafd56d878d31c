CRD_GROUP = "epam.com"
CRD_VERSION = "v1alpha1"
CRD_PLURAL_WEB = "webs"
CRD_KIND_WEB = "Web"
