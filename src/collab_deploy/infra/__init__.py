"""External collaborators: Kubernetes cluster and container registry."""
